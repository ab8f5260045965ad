"""Asset dispatch for the /src/ prefix.

The branch is chosen once when the app is built:

* embedded (any ENV but "development"): serve the pre-built files packaged
  under ``assets/src/dist`` with an ETag of their sha256.
* live build (ENV=development): run the bundler for every request and hand
  back the matching output file. Build errors come back as a 200 script that
  alerts the message in the browser.
"""

import html
import json
import logging
import posixpath
import time
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import HTMLResponse, Response, StreamingResponse

from quotesite.bundler import BuildFailure, BuildOptions, OutputFile, build_or_raise
from quotesite.static_bundle import AssetNotFound, StaticBundle, content_type_for

logger = logging.getLogger(__name__)

DIST_DIR = "src/dist"


def build_error_script(error: Exception) -> str:
    return f"alert({json.dumps(str(error))})"


def render_index(bundle: StaticBundle) -> HTMLResponse:
    """Plain directory listing of the embedded bundle."""
    items = "".join(
        f'<li><a href="{html.escape(p)}">{html.escape(p)}</a></li>' for p in bundle.list_all()
    )
    return HTMLResponse(f"<html><body><ul>{items}</ul></body></html>")


def find_output(output_files, outdir: str, request_path: str) -> OutputFile:
    """First output whose path, minus the outdir, ends with ``request_path``."""
    produced = []
    for output_file in output_files:
        relative = output_file.path
        if relative.startswith(outdir):
            relative = relative[len(outdir):]
        if relative.endswith(request_path):
            return output_file
        produced.append(output_file.path)
    raise AssetNotFound(request_path, produced)


class AssetDispatcher(ABC):
    def __init__(self, prefix: str, bundle: StaticBundle):
        self.prefix = prefix
        self.bundle = bundle

    def request_path(self, url_path: str) -> str:
        if url_path.startswith(self.prefix):
            return url_path[len(self.prefix):]
        return url_path.lstrip("/")

    @abstractmethod
    def handle(self, url_path: str) -> Response:
        """Serve the asset for a URL path under the prefix."""


class EmbeddedAssetDispatcher(AssetDispatcher):
    def handle(self, url_path: str) -> Response:
        request_path = self.request_path(url_path)
        file_path = posixpath.join(DIST_DIR, request_path)

        logger.info(f"Serving embedded file {url_path} -> {file_path}")

        try:
            stream, digest = self.bundle.open(file_path)
        except AssetNotFound as e:
            logger.error(f"Failed to open embedded file {file_path}: {e}")
            logger.info(f"Embedded files: {e.available}")
            raise HTTPException(status_code=404, detail="Not Found")

        return StreamingResponse(
            stream,
            media_type=content_type_for(request_path),
            headers={
                "Cache-Control": "no-cache, no-store, must-revalidate",
                "ETag": digest,
            },
        )


class LiveBuildAssetDispatcher(AssetDispatcher):
    def __init__(self, prefix: str, bundle: StaticBundle, bundler, options: BuildOptions):
        super().__init__(prefix, bundle)
        self.bundler = bundler
        self.options = options

    def handle(self, url_path: str) -> Response:
        request_path = self.request_path(url_path)

        if request_path in ("", "/"):
            # Lists the embedded bundle, not the live build output
            return render_index(self.bundle)

        started = time.perf_counter()
        try:
            output_file = self._build(request_path)
        except BuildFailure as e:
            logger.error(f"Error building package {request_path}: {e}")
            error = RuntimeError(f"Failed to build {request_path}: {e}")
            return Response(build_error_script(error), media_type="application/javascript")
        except AssetNotFound as e:
            logger.error(f"{e}. Existing files: {e.available}")
            raise HTTPException(
                status_code=404, detail=f"{e}. Existing files: {e.available}"
            )
        finally:
            logger.info(f"Built package {request_path} in {time.perf_counter() - started:.3f}s")

        return Response(output_file.contents, media_type=content_type_for(request_path))

    def _build(self, request_path: str) -> OutputFile:
        result = build_or_raise(self.bundler, self.options)
        return find_output(result.output_files, str(self.options.outdir), request_path)


def make_dispatcher(
    development: bool,
    prefix: str,
    bundle: StaticBundle,
    bundler=None,
    options: Optional[BuildOptions] = None,
) -> AssetDispatcher:
    if not development:
        return EmbeddedAssetDispatcher(prefix, bundle)
    if bundler is None or options is None:
        raise ValueError("live builds need a bundler and build options")
    return LiveBuildAssetDispatcher(prefix, bundle, bundler, options)
