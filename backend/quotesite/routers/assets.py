"""Frontend asset endpoint: embedded bundle or live esbuild output."""

from fastapi import APIRouter, Request


def build_router(prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix.rstrip("/"), tags=["Assets"])

    # Plain def: live builds block on a subprocess, so this runs on the threadpool
    @router.get("/{asset_path:path}", include_in_schema=False)
    def serve_asset(request: Request, asset_path: str):
        return request.app.state.asset_dispatcher.handle(request.url.path)

    return router
