"""
Tests for asset extraction: filtering, sorting, public path and cache busting.
"""

import pytest

from plugins.html_assets.asset_extractor import (
    AssetReference,
    Compilation,
    append_hash,
    filter_chunks,
    get_assets_from_compilation,
    get_public_path,
    sort_entry_chunks,
)
from plugins.html_assets.errors import ConfigurationError
from plugins.html_assets.options import HtmlAssetsOptions


@pytest.fixture
def compilation():
    return Compilation(
        entrypoints={
            "main": ["main.js", "main.css", "main.js.map"],
            "vendor": ["vendor.js"],
        },
        hash="abc123",
        assets={"main.js": None, "main.css": None, "vendor.js": None, "logo.png": None},
        output_path="/site",
        public_path="/assets/",
    )


class TestFilterChunks:
    """Include/exclude filtering keeps the original relative order."""

    def test_all(self):
        """Test: "all" keeps every entry."""
        assert filter_chunks(["c", "a", "b"], "all", []) == ["c", "a", "b"]

    def test_include_and_exclude(self):
        """Test: Result is names ∩ include minus exclude."""
        names = ["c", "a", "b", "d"]
        assert filter_chunks(names, ["a", "b", "x"], ["b"]) == ["a"]
        assert filter_chunks(names, ["d", "a"], []) == ["a", "d"]
        assert filter_chunks(names, "all", ["a", "d"]) == ["c", "b"]


class TestSortEntryChunks:
    """Named strategies and custom comparators."""

    def test_comparator(self):
        """Test: A callable is used as a two argument comparator."""
        def reverse(a, b):
            return (a < b) - (a > b)

        assert sort_entry_chunks(["a", "c", "b"], reverse, None) == ["c", "b", "a"]

    def test_unknown_mode(self):
        """Test: Unknown sort mode names are a configuration error."""
        with pytest.raises(ConfigurationError, match="not a valid chunk sort mode"):
            sort_entry_chunks(["a"], "random", None)

    def test_unknown_mode_aborts_extraction(self, compilation):
        """Test: The extractor surfaces an unknown sort mode."""
        with pytest.raises(ConfigurationError):
            get_assets_from_compilation(compilation, HtmlAssetsOptions(chunks_sort_mode="nope"), "index.html")


class TestPublicPath:
    """Explicit public paths win, otherwise paths are relative to the HTML file."""

    def test_explicit_public_path_gets_trailing_slash(self):
        """Test: An explicit public path ends with a single slash."""
        assert get_public_path(Compilation({}, public_path="/static"), "index.html") == "/static/"
        assert get_public_path(Compilation({}, public_path="/static/"), "index.html") == "/static/"
        assert get_public_path(Compilation({}, public_path=""), "index.html") == ""

    def test_relative_public_path(self, tmp_path):
        """Test: Without public path, urls are relative to the HTML file."""
        compilation = Compilation({}, output_path=str(tmp_path))
        assert get_public_path(compilation, "index.html") == ""
        assert get_public_path(compilation, "docs/index.html") == "../"
        assert get_public_path(compilation, "a/b/index.html") == "../../"


class TestAppendHash:
    def test_append_hash(self):
        """Test: Hash is appended as query string, reusing an existing one."""
        assert append_hash("/main.js", "h") == "/main.js?h"
        assert append_hash("/main.js?v=1", "h") == "/main.js?v=1&h"
        assert append_hash("", "h") == ""
        assert append_hash(None, "h") is None


class TestGetAssetsFromCompilation:
    """End-to-end extraction."""

    def test_scripts_and_styles(self, compilation):
        """Test: Files are split by extension, other files are skipped, order is kept."""
        assets = get_assets_from_compilation(compilation, HtmlAssetsOptions(chunks_sort_mode="none"), "index.html")
        assert assets.public_path == "/assets/"
        assert assets.js == [
            AssetReference("main", "/assets/main.js"),
            AssetReference("vendor", "/assets/vendor.js"),
        ]
        assert assets.css == [AssetReference("main", "/assets/main.css")]
        assert assets.manifest is None
        assert assets.favicon is None

    def test_hash_keeps_classification(self, compilation):
        """Test: Cache busting query strings do not hide the extension."""
        assets = get_assets_from_compilation(compilation, HtmlAssetsOptions(hash=True), "index.html")
        assert [a.path for a in assets.js] == ["/assets/main.js?abc123", "/assets/vendor.js?abc123"]
        assert [a.path for a in assets.css] == ["/assets/main.css?abc123"]

    def test_filter_and_sort(self, compilation):
        """Test: Excluded entries are dropped before files are collected."""
        compilation.entrypoints["app"] = ["app.js"]
        options = HtmlAssetsOptions(exclude_chunks=["main"], chunks_sort_mode="alphabetical")
        assets = get_assets_from_compilation(compilation, options, "index.html")
        assert [a.entry_name for a in assets.js] == ["app", "vendor"]
        assert assets.css == []

    def test_manifest(self, compilation):
        """Test: The first .appcache asset is the manifest, hashed like the others."""
        compilation.assets["offline.appcache"] = None
        compilation.assets["other.appcache"] = None
        assert get_assets_from_compilation(compilation, HtmlAssetsOptions(), "index.html").manifest == "offline.appcache"
        hashed = get_assets_from_compilation(compilation, HtmlAssetsOptions(hash=True), "index.html")
        assert hashed.manifest == "offline.appcache?abc123"

    def test_favicon(self, compilation):
        """Test: The favicon is served from the public path under its basename."""
        options = HtmlAssetsOptions(favicon="docs/img/favicon.ico", hash=True)
        assets = get_assets_from_compilation(compilation, options, "index.html")
        assert assets.favicon == "/assets/favicon.ico?abc123"

    def test_favicon_flag_is_not_a_path(self, compilation):
        """Test: A favicon set to True after validation never becomes href="/assets/True"."""
        options = HtmlAssetsOptions()
        options.favicon = True
        with pytest.raises(ConfigurationError):
            get_assets_from_compilation(compilation, options, "index.html")


class TestEmitAsset:
    def test_duplicate_output_name(self):
        """Test: Two outputs cannot emit to the same filename."""
        compilation = Compilation({})
        compilation.emit_asset("index.html", "<html></html>")
        assert compilation.assets["index.html"] == "<html></html>"
        with pytest.raises(ConfigurationError, match="Conflict"):
            compilation.emit_asset("index.html", "<html></html>")
