"""
Tests for asset -> tag conversion and head/body grouping.
"""

import pytest

from plugins.html_assets.asset_extractor import AssetReference
from plugins.html_assets.errors import ConfigurationError
from plugins.html_assets.tag_generators import (
    AssetTags,
    AttributeMap,
    StringContent,
    Suppressed,
    generate_asset_groups,
    generate_favicon_tags,
    generate_meta_tags,
    generate_script_tags,
    generate_style_tags,
    resolve_meta_entry,
)


class TestAssetTags:
    def test_script_tags(self):
        """Test: One non-void script per asset, tagged with its entry."""
        tags = generate_script_tags([AssetReference("main", "/main.js"), AssetReference("vendor", "/vendor.js")])
        assert [t.tag_name for t in tags] == ["script", "script"]
        assert [t.entry for t in tags] == ["main", "vendor"]
        assert tags[0].void_tag is False
        assert tags[0].attributes == {"src": "/main.js"}

    def test_style_tags(self):
        """Test: One void stylesheet link per asset."""
        (tag,) = generate_style_tags([AssetReference("main", "/main.css")])
        assert tag.tag_name == "link"
        assert tag.void_tag is True
        assert tag.attributes == {"href": "/main.css", "rel": "stylesheet"}

    def test_favicon_tags(self):
        """Test: Favicon generates a single shortcut icon link when enabled."""
        assert generate_favicon_tags(False) == []
        assert generate_favicon_tags(None) == []
        (tag,) = generate_favicon_tags("/favicon.ico")
        assert str(tag) == '<link rel="shortcut icon" href="/favicon.ico">'


class TestMetaTags:
    def test_disabled(self):
        """Test: Disabled meta option produces no tags."""
        assert generate_meta_tags(False) == []
        assert generate_meta_tags({}) == []

    def test_resolve_meta_entry(self):
        """Test: Each meta value maps to exactly one variant."""
        assert resolve_meta_entry("viewport", "width=500") == StringContent("viewport", "width=500")
        assert resolve_meta_entry("og", {"property": "og:title"}) == AttributeMap({"property": "og:title"})
        assert resolve_meta_entry("robots", False) == Suppressed("robots")

    def test_meta_tags(self):
        """Test: Strings expand to name/content, mappings are used verbatim, False is skipped."""
        tags = generate_meta_tags({
            "viewport": "width=device-width",
            "robots": False,
            "og-title": {"property": "og:title", "content": "Docs"},
        })
        assert [str(t) for t in tags] == [
            '<meta name="viewport" content="width=device-width">',
            '<meta property="og:title" content="Docs">',
        ]
        assert all(t.void_tag for t in tags)

    @pytest.mark.parametrize("value", [True, None, 42, {}])
    def test_invalid_meta_tag(self, value):
        """Test: Values that do not describe a tag are a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid meta tag"):
            generate_meta_tags({"broken": value})


class TestAssetGroups:
    @pytest.fixture
    def asset_tags(self):
        return AssetTags(
            scripts=generate_script_tags([AssetReference("main", "/main.js")]),
            styles=generate_style_tags([AssetReference("main", "/main.css")]),
            meta=generate_meta_tags({"viewport": "width=500"}),
            favicons=generate_favicon_tags("/favicon.ico"),
        )

    def test_scripts_in_body(self, asset_tags):
        """Test: Head is meta, favicons, styles; scripts go to the body."""
        groups = generate_asset_groups(asset_tags, "body")
        assert [t.tag_name for t in groups.head_tags] == ["meta", "link", "link"]
        assert groups.head_tags[1].attributes["rel"] == "shortcut icon"
        assert groups.head_tags[2].attributes["rel"] == "stylesheet"
        assert [t.tag_name for t in groups.body_tags] == ["script"]

    def test_scripts_in_head(self, asset_tags):
        """Test: With the head target scripts are appended to the head."""
        groups = generate_asset_groups(asset_tags, "head")
        assert groups.body_tags == []
        assert [t.tag_name for t in groups.head_tags] == ["meta", "link", "link", "script"]
