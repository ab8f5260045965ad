"""Blocking HTTP server wrapper around uvicorn."""

import logging
import sys

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)


class Server:
    def __init__(self, addr: str, app: FastAPI, log_level: str = "info"):
        host, _, port = addr.rpartition(":")
        self.addr = addr
        self.host = host or "0.0.0.0"
        self.port = int(port)
        self.app = app
        self.log_level = log_level.lower()

    def listen(self) -> None:
        """Serve until the process is killed. Exits with status 1 on failure."""
        logger.info(f"Server is starting on {self.addr}")
        try:
            uvicorn.run(self.app, host=self.host, port=self.port, log_level=self.log_level)
        except SystemExit as e:
            # uvicorn exits with status 1 when it cannot bind
            if e.code:
                logger.critical(f"Server failed on {self.addr} (exit status {e.code})")
            raise
        except Exception as e:
            logger.critical(f"Server failed: {e}", exc_info=True)
            sys.exit(1)
