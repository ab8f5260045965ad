"""Shared fixtures: throwaway asset bundles, a fake bundler and app clients."""

import pytest
from httpx import AsyncClient, ASGITransport

from quotesite.bundler import BuildResult
from quotesite.config import Settings
from quotesite.main import create_app
from quotesite.static_bundle import StaticBundle

INDEX_HTML = b"<!DOCTYPE html><html><body><div id=\"root\"></div></body></html>"
INDEX_JS = b"(()=>{console.log(\"hi\")})();"
INDEX_CSS = b".page{display:flex}"


class FakeBundler:
    """Stands in for esbuild: returns a canned result and counts builds."""

    def __init__(self, result: BuildResult = None):
        self.result = result or BuildResult()
        self.calls = []

    def build(self, options):
        self.calls.append(options)
        return self.result


@pytest.fixture
def assets_dir(tmp_path):
    base = tmp_path / "assets"
    (base / "public").mkdir(parents=True)
    (base / "src" / "dist").mkdir(parents=True)
    (base / "public" / "index.html").write_bytes(INDEX_HTML)
    (base / "src" / "dist" / "index.js").write_bytes(INDEX_JS)
    (base / "src" / "dist" / "index.css").write_bytes(INDEX_CSS)
    return base


@pytest.fixture
def public_bundle(assets_dir):
    return StaticBundle.from_directory(assets_dir, "public")


@pytest.fixture
def dist_bundle(assets_dir):
    return StaticBundle.from_directory(assets_dir, "src/dist")


@pytest.fixture
def fake_bundler():
    return FakeBundler()


@pytest.fixture
def make_settings(assets_dir):
    def _make(env: str = "", **overrides) -> Settings:
        overrides.setdefault("ASSET_SOURCE_DIR", str(assets_dir / "src"))
        return Settings(ENV=env, **overrides)

    return _make


@pytest.fixture
def make_app(make_settings, public_bundle, dist_bundle, fake_bundler):
    def _make(env: str = "", public=None, bundler=None, **overrides):
        return create_app(
            settings=make_settings(env, **overrides),
            public=public if public is not None else public_bundle,
            dist=dist_bundle,
            bundler=bundler or fake_bundler,
        )

    return _make


@pytest.fixture
def client_for():
    def _client(app):
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _client


@pytest.fixture
async def client(make_app, client_for):
    async with client_for(make_app()) as c:
        yield c
