"""
Turn extracted assets and plugin options into `HtmlTag` objects.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .asset_extractor import AssetReference
from .errors import ConfigurationError
from .html_tags import HtmlTag


@dataclass
class AssetTags:
    scripts: List[HtmlTag] = field(default_factory=list)
    styles: List[HtmlTag] = field(default_factory=list)
    meta: List[HtmlTag] = field(default_factory=list)
    favicons: List[HtmlTag] = field(default_factory=list)


@dataclass
class TagGroups:
    head_tags: List[HtmlTag] = field(default_factory=list)
    body_tags: List[HtmlTag] = field(default_factory=list)


# Meta option values, e.g.
#   viewport: "width=device-width"          -> StringContent
#   og-title: {property: og:title, ...}     -> AttributeMap
#   robots: false                           -> Suppressed


@dataclass(frozen=True)
class StringContent:
    name: str
    content: str

    def attributes(self) -> Dict[str, Any]:
        return {"name": self.name, "content": self.content}


@dataclass(frozen=True)
class AttributeMap:
    mapping: Dict[str, Any]

    def attributes(self) -> Dict[str, Any]:
        return dict(self.mapping)


@dataclass(frozen=True)
class Suppressed:
    name: str


MetaEntry = Union[StringContent, AttributeMap, Suppressed]


def resolve_meta_entry(name: str, value: Any) -> MetaEntry:
    """Discriminate a single `meta` option value."""
    if value is False:
        return Suppressed(name)
    if isinstance(value, str):
        return StringContent(name, value)
    if isinstance(value, dict) and value:
        return AttributeMap(value)
    raise ConfigurationError(f"Invalid meta tag '{name}': {value!r}")


def generate_script_tags(js_assets: List[AssetReference]) -> List[HtmlTag]:
    return [
        HtmlTag(
            tag_name="script",
            void_tag=False,
            entry=asset.entry_name,
            attributes={"src": asset.path},
        )
        for asset in js_assets
    ]


def generate_style_tags(css_assets: List[AssetReference]) -> List[HtmlTag]:
    return [
        HtmlTag(
            tag_name="link",
            void_tag=True,
            entry=asset.entry_name,
            attributes={"href": asset.path, "rel": "stylesheet"},
        )
        for asset in css_assets
    ]


def generate_meta_tags(meta_options: Optional[Union[bool, Dict[str, Any]]]) -> List[HtmlTag]:
    """One `<meta>` per enabled entry of the `meta` option, in declaration order."""
    if not meta_options:
        return []
    if not isinstance(meta_options, dict):
        raise ConfigurationError(f"Invalid meta option: {meta_options!r}")

    entries = [resolve_meta_entry(name, value) for name, value in meta_options.items()]
    return [
        HtmlTag(tag_name="meta", void_tag=True, attributes=entry.attributes())
        for entry in entries
        if not isinstance(entry, Suppressed)
    ]


def generate_favicon_tags(favicon_path: Optional[Union[bool, str]]) -> List[HtmlTag]:
    if not favicon_path:
        return []
    return [
        HtmlTag(
            tag_name="link",
            void_tag=True,
            attributes={"rel": "shortcut icon", "href": favicon_path},
        )
    ]


def generate_asset_groups(asset_tags: AssetTags, script_target: str) -> TagGroups:
    """Split tags into head and body. Scripts are never split between both."""
    groups = TagGroups(
        head_tags=[*asset_tags.meta, *asset_tags.favicons, *asset_tags.styles],
        body_tags=[],
    )
    if script_target == "head":
        groups.head_tags.extend(asset_tags.scripts)
    else:
        groups.body_tags.extend(asset_tags.scripts)
    return groups
