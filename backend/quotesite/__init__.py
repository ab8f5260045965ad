"""Quote homepage server with embedded or live-built frontend assets."""

__version__ = "1.0.0"
