"""Tests for the in-memory snapshot of packaged frontend files."""

import hashlib

import pytest

from quotesite.static_bundle import (
    ASSETS_DIR,
    DEFAULT_CONTENT_TYPE,
    AssetNotFound,
    StaticBundle,
    content_type_for,
)

from conftest import INDEX_CSS, INDEX_JS


class TestStaticBundle:
    def test_paths_are_relative_to_base(self, dist_bundle):
        assert dist_bundle.list_all() == ["src/dist/index.css", "src/dist/index.js"]

    def test_listing_excludes_directories(self, assets_dir):
        (assets_dir / "src" / "dist" / "fonts").mkdir()
        (assets_dir / "src" / "dist" / "fonts" / "a.woff2").write_bytes(b"\x00")
        bundle = StaticBundle.from_directory(assets_dir, "src/dist")
        assert "src/dist/fonts" not in bundle.list_all()
        assert "src/dist/fonts/a.woff2" in bundle.list_all()

    def test_open_returns_stream_and_sha256(self, dist_bundle):
        stream, digest = dist_bundle.open("src/dist/index.js")
        assert stream.read() == INDEX_JS
        assert digest == hashlib.sha256(INDEX_JS).hexdigest()

    def test_open_twice_gives_independent_streams(self, dist_bundle):
        first, _ = dist_bundle.open("src/dist/index.css")
        first.read()
        second, _ = dist_bundle.open("src/dist/index.css")
        assert second.read() == INDEX_CSS

    def test_missing_file_lists_known_paths(self, dist_bundle):
        with pytest.raises(AssetNotFound) as exc:
            dist_bundle.open("src/dist/missing.js")
        assert exc.value.available == dist_bundle.list_all()

    def test_parent_segments_do_not_escape(self, dist_bundle):
        with pytest.raises(AssetNotFound):
            dist_bundle.read("src/dist/../../public/index.html")

    def test_snapshot_is_not_affected_by_disk_changes(self, assets_dir):
        bundle = StaticBundle.from_directory(assets_dir, "src/dist")
        (assets_dir / "src" / "dist" / "index.js").write_bytes(b"changed")
        assert bundle.read("src/dist/index.js") == INDEX_JS

    def test_missing_directory_gives_empty_bundle(self, tmp_path):
        assert StaticBundle.from_directory(tmp_path, "nope").list_all() == []

    def test_packaged_assets_contain_home_page(self):
        bundle = StaticBundle.from_directory(ASSETS_DIR, "public")
        assert "public/index.html" in bundle

    def test_packaged_dist_has_one_file_per_entry_point(self):
        bundle = StaticBundle.from_directory(ASSETS_DIR, "src/dist")
        assert {"src/dist/index.js", "src/dist/index.css"} <= set(bundle.list_all())


class TestContentType:
    def test_known_extensions(self):
        assert content_type_for("index.css") == "text/css"
        assert content_type_for("index.html") == "text/html"
        assert "javascript" in content_type_for("index.js")

    def test_unknown_extension_falls_back(self):
        assert content_type_for("blob.unknownext") == DEFAULT_CONTENT_TYPE
        assert content_type_for("no_extension") == DEFAULT_CONTENT_TYPE
