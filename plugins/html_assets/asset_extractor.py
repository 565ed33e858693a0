"""
Extract the script/style asset information of a compilation for one HTML output.
"""

import functools
import logging
import os
import posixpath
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import chunk_sorter
from .errors import ConfigurationError
from .options import HtmlAssetsOptions, optional_str

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

# `.css`/`.js` optionally followed by a query string, e.g. `main.js?abc123`
EXTENSION_RE = re.compile(r"\.(css|js)(\?|$)")

MANIFEST_EXTENSION = ".appcache"


@dataclass
class AssetReference:
    entry_name: str
    path: str


@dataclass
class AssetBundle:
    """Resolved asset urls for one HTML output, in load order."""

    public_path: str
    js: List[AssetReference] = field(default_factory=list)
    css: List[AssetReference] = field(default_factory=list)
    manifest: Optional[str] = None
    favicon: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "public_path": self.public_path,
            "js": [ref.path for ref in self.js],
            "css": [ref.path for ref in self.css],
            "manifest": self.manifest,
            "favicon": self.favicon,
        }


@dataclass
class Compilation:
    """Snapshot of a finished build, as seen by the HTML pipeline.

    - entrypoints: entry name -> output files, both in build order
    - hash: run scoped hash used for cache busting
    - assets: every output file name of the build (values are build specific)
    - output_path: directory the build writes to
    - public_path: url prefix of the output files, None when not configured
    - dependencies: entry name -> entry names it needs loaded first
    """

    entrypoints: Dict[str, List[str]]
    hash: str = ""
    assets: Dict[str, Any] = field(default_factory=dict)
    output_path: str = "."
    public_path: Optional[str] = None
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
    emitted: Dict[str, str] = field(default_factory=dict)

    def emit_asset(self, name: str, source: str) -> None:
        """Register a generated file. Output names must be unique per build."""
        if name in self.emitted:
            raise ConfigurationError(f"Conflict: multiple outputs emit to the same filename '{name}'")
        self.emitted[name] = source
        self.assets[name] = source


def append_hash(url: Optional[str], hash_: str) -> Optional[str]:
    """Append `hash_` as query string for cache busting."""
    if not url:
        return url
    return url + ("&" if "?" in url else "?") + hash_


def get_public_path(compilation: Compilation, output_name: str) -> str:
    """Explicit public path if configured, otherwise the relative path from the
    HTML file's directory back to the output root."""
    if compilation.public_path is not None:
        public_path = compilation.public_path
    else:
        output_root = os.path.abspath(compilation.output_path)
        html_dir = os.path.dirname(os.path.join(output_root, output_name))
        public_path = os.path.relpath(output_root, html_dir)
        if public_path == os.curdir:
            public_path = ""
        public_path = "/".join(public_path.split(os.sep))

    if public_path and not public_path.endswith("/"):
        public_path += "/"
    return public_path


def filter_chunks(entry_names: List[str], included_chunks, excluded_chunks) -> List[str]:
    """Keep included entries (all of them for "all") minus the excluded ones, order preserved."""
    result = []
    for name in entry_names:
        if isinstance(included_chunks, list) and name not in included_chunks:
            continue
        if isinstance(excluded_chunks, list) and name in excluded_chunks:
            continue
        result.append(name)
    return result


def sort_entry_chunks(entry_names: List[str], sort_mode, compilation: Compilation, options=None) -> List[str]:
    if callable(sort_mode):
        return sorted(entry_names, key=functools.cmp_to_key(sort_mode))

    sorter = chunk_sorter.SORTERS.get(sort_mode) if isinstance(sort_mode, str) else None
    if sorter is None:
        raise ConfigurationError(f'"{sort_mode}" is not a valid chunk sort mode')
    return sorter(entry_names, compilation, options)


def get_sorted_entry_names(compilation: Compilation, options: HtmlAssetsOptions) -> List[str]:
    entry_names = list(compilation.entrypoints.keys())
    filtered = filter_chunks(entry_names, options.chunks, options.exclude_chunks)
    return sort_entry_chunks(filtered, options.chunks_sort_mode, compilation, options)


def find_manifest(compilation: Compilation) -> Optional[str]:
    for asset_file in compilation.assets:
        if posixpath.splitext(asset_file)[1] == MANIFEST_EXTENSION:
            return asset_file
    return None


def get_favicon_path(favicon: Optional[str], public_path: str, compilation: Compilation, options: HtmlAssetsOptions) -> Optional[str]:
    if not favicon:
        return None
    favicon_path = public_path + posixpath.basename(favicon.replace("\\", "/"))
    return append_hash(favicon_path, compilation.hash) if options.hash else favicon_path


def get_assets_from_compilation(
    compilation: Compilation, options: HtmlAssetsOptions, output_name: str
) -> AssetBundle:
    """Collect the js/css files of every selected entry, prefixed with the public path."""
    entry_names = get_sorted_entry_names(compilation, options)
    public_path = get_public_path(compilation, output_name)

    assets = AssetBundle(public_path=public_path)

    assets.manifest = find_manifest(compilation)
    if options.hash and assets.manifest:
        assets.manifest = append_hash(assets.manifest, compilation.hash)

    assets.favicon = get_favicon_path(optional_str(options.favicon), public_path, compilation, options)

    for entry_name in entry_names:
        for chunk_file in compilation.entrypoints.get(entry_name, []):
            entry_public_path = public_path + chunk_file
            if options.hash:
                entry_public_path = append_hash(entry_public_path, compilation.hash)

            match = EXTENSION_RE.search(entry_public_path)
            # Source maps, images, ... are expected in entry file lists
            if not match:
                continue

            target = assets.js if match.group(1) == "js" else assets.css
            target.append(AssetReference(entry_name=entry_name, path=entry_public_path))

    logger.debug(
        "%s: entries=%s js=%d css=%d manifest=%s",
        output_name,
        entry_names,
        len(assets.js),
        len(assets.css),
        assets.manifest,
    )
    return assets
