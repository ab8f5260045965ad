"""Read-only snapshot of the frontend files shipped with the package.

Files are loaded once into memory at startup and never change afterwards.
Paths are POSIX style and relative to the ``assets`` directory, e.g.
``public/index.html`` or ``src/dist/index.js``.
"""

import hashlib
import logging
import mimetypes
import posixpath
from io import BytesIO
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO, Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class AssetNotFound(LookupError):
    """Raised when a path has no file, carrying the paths that do exist."""

    def __init__(self, path: str, available: Iterable[str] = ()):
        self.path = path
        self.available = list(available)
        super().__init__(f"file not found: {path}")


def content_type_for(path: str) -> str:
    """Guess a Content-Type from the file extension, never failing."""
    content_type, _ = mimetypes.guess_type(path)
    return content_type or DEFAULT_CONTENT_TYPE


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class StaticBundle:
    def __init__(self, files: Mapping[str, bytes]):
        self._files = MappingProxyType(dict(files))

    @classmethod
    def from_directory(cls, base_dir: Path, *subdirs: str) -> "StaticBundle":
        """Load every file below ``base_dir/<subdir>`` keyed by its path relative to ``base_dir``."""
        base_dir = Path(base_dir)
        roots = [base_dir / s for s in subdirs] if subdirs else [base_dir]
        files = {}
        for root in roots:
            if not root.is_dir():
                logger.warning(f"Static bundle directory missing: {root}")
                continue
            for file_path in sorted(root.rglob("*")):
                if file_path.is_file():
                    files[file_path.relative_to(base_dir).as_posix()] = file_path.read_bytes()
        return cls(files)

    def __contains__(self, path: str) -> bool:
        return self._normalize(path) in self._files

    @staticmethod
    def _normalize(path: str) -> str:
        return posixpath.normpath(path.lstrip("/"))

    def read(self, path: str) -> bytes:
        key = self._normalize(path)
        try:
            return self._files[key]
        except KeyError:
            raise AssetNotFound(key, self.list_all()) from None

    def open(self, path: str) -> Tuple[BinaryIO, str]:
        """Return a fresh stream over the file and the hex sha256 of its bytes.

        The hash is computed from a full read before the stream handed back
        to the caller is created, so it is available before streaming starts.
        """
        data = self.read(path)
        return BytesIO(data), content_hash(data)

    def list_all(self) -> List[str]:
        """All file paths in walk order (directories excluded)."""
        return sorted(self._files)
