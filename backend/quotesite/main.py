"""FastAPI application: home page, quote API, health check and /src/ assets."""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from quotesite import __version__
from quotesite.bundler import EsbuildBundler, build_options
from quotesite.config import Settings, get_settings
from quotesite.dispatcher import make_dispatcher
from quotesite.quotes import QuoteStore
from quotesite.routers import assets, quote
from quotesite.static_bundle import ASSETS_DIR, AssetNotFound, StaticBundle

logger = logging.getLogger(__name__)

HOME_PAGE = "public/index.html"


def create_app(
    settings: Optional[Settings] = None,
    public: Optional[StaticBundle] = None,
    dist: Optional[StaticBundle] = None,
    bundler=None,
    quotes: Optional[QuoteStore] = None,
) -> FastAPI:
    """Build the application.

    The asset branch (embedded or live build) is fixed here for the lifetime
    of the app. Raises ConfigurationError when the working directory cannot
    be resolved.
    """
    settings = settings or get_settings()
    public = public if public is not None else StaticBundle.from_directory(ASSETS_DIR, "public")
    dist = dist if dist is not None else StaticBundle.from_directory(ASSETS_DIR, "src/dist")

    options = build_options(settings)
    if settings.is_development and bundler is None:
        bundler = EsbuildBundler.from_settings(settings)

    app = FastAPI(
        title="Quote Site",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.public = public
    app.state.quotes = quotes or QuoteStore()
    app.state.asset_dispatcher = make_dispatcher(
        settings.is_development, settings.ASSET_PREFIX, dist, bundler, options
    )

    logger.info(
        f"Serving {settings.ASSET_PREFIX} from "
        f"{'live esbuild builds' if settings.is_development else 'the embedded bundle'}"
    )

    app.include_router(quote.router)
    app.include_router(assets.build_router(settings.ASSET_PREFIX))

    @app.get("/health", tags=["Health"])
    def health_check(request: Request):
        if request.url.path != "/health":
            raise HTTPException(status_code=404, detail="Not Found")
        return PlainTextResponse("OK")

    # Catch-all so the home handler sees every unmatched path; only "/" is served
    @app.get("/{full_path:path}", response_class=HTMLResponse, include_in_schema=False)
    def home(request: Request, full_path: str):
        if request.url.path != "/":
            raise HTTPException(status_code=404, detail="Not Found")
        try:
            page = request.app.state.public.read(HOME_PAGE)
        except AssetNotFound:
            raise HTTPException(status_code=404, detail="File not found")
        return HTMLResponse(page)

    return app
