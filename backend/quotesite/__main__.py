"""Command-line entry point.

    python -m quotesite serve     # run the HTTP server (default)
    python -m quotesite build     # pre-build the embedded frontend bundle
"""

import argparse
import logging
import sys

from quotesite.bundler import BuildFailure, build_assets
from quotesite.config import ConfigurationError, get_settings

logger = logging.getLogger("quotesite")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="quotesite", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("command", nargs="?", choices=["serve", "build"], default="serve")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "build":
        try:
            build_assets(settings)
        except BuildFailure:
            return 1
        except ConfigurationError as e:
            logger.critical(f"Failed to configure build: {e}")
            return 1
        return 0

    from quotesite.main import create_app
    from quotesite.server import Server

    try:
        app = create_app(settings)
    except ConfigurationError as e:
        logger.critical(f"Failed to configure server: {e}")
        return 1

    Server(settings.addr, app, log_level=settings.LOG_LEVEL).listen()
    return 0


if __name__ == "__main__":
    sys.exit(main())
