"""
An MkDocs plugin to generate standalone HTML documents with the site's script and
style assets injected into them
"""

import asyncio
import hashlib
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound
from mkdocs.config import config_options as c
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.plugins import BasePlugin

from .asset_extractor import Compilation
from .core import OutputJob, generate_all
from .errors import ConfigurationError
from .hooks import HtmlAssetsHooks
from .options import HtmlAssetsOptions
from .render_html import TemplateFunction

# Use MkDocs' recommended plugin logger namespace so debug logs appear only with `--verbose`.
logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

# MkDocs config keys used to build the default `main` entry when `entries` is empty.
# Scripts first so the entry keeps the order of a regular MkDocs page.
EXTRAS: Dict[str, str] = {
    "js": "extra_javascript",
    "css": "extra_css",
}

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{{ html_assets_plugin.options.title }}</title>
  </head>
  <body>
  </body>
</html>
"""


class SiteCompilation(Compilation):
    """Compilation whose emitted files are written below `site_dir`."""

    def emit_asset(self, name: str, source: str) -> None:
        super().emit_asset(name, source)
        target = Path(self.output_path) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf8")
        logger.info("[html_assets] wrote %s", name)


class HtmlAssetsPlugin(BasePlugin):
    """MkDocs plugin that renders HTML documents and injects the build's assets.

    Configuration options (all optional):
    - entries (dict): entry name -> list of files (relative to site_dir). Defaults to a single
      `main` entry made of `extra_javascript` and `extra_css`.
    - dependencies (dict): entry name -> entries it depends on (used by `chunks_sort_mode: dependency`).
    - chunks ("all"|list): entries to include. exclude_chunks (list): entries to drop.
    - chunks_sort_mode (str): none, auto, manual, alphabetical or dependency.
    - inject (bool|"head"|"body"): where scripts go; false disables injection.
    - hash (bool): append the build hash to every asset url for cache busting.
    - xhtml (bool): self-close void tags.
    - meta (dict|false): meta tags, `name: content` or `name: {attributes}`.
    - favicon (str|false): favicon file (relative to mkdocs.yml), copied to site_dir.
    - public_path (str): url prefix of assets; defaults to a path relative to each output.
    - minify (bool) / minify_opts (dict): minify the generated HTML with htmlmin.
    - title (str): default document title.
    - template (str): Jinja2 template (relative to mkdocs.yml) used when an output has none.
    - outputs (list): filenames or `{filename, template, title}` mappings to generate.
    """

    config_scheme = (
        ('entries',          c.Type(dict, default={})),
        ('dependencies',     c.Type(dict, default={})),
        ('chunks',           c.Type((str, list), default="all")),
        ('exclude_chunks',   c.Type(list, default=[])),
        ('chunks_sort_mode', c.Type(str, default="auto")),
        ('inject',           c.Type((bool, str), default=True)),
        ('hash',             c.Type(bool, default=False)),
        ('xhtml',            c.Type(bool, default=False)),
        ('meta',             c.Type((bool, dict), default={})),
        ('favicon',          c.Type((bool, str), default=False)),
        ('public_path',      c.Type(str, default=None)),
        ('minify',           c.Type(bool, default=False)),
        ('minify_opts',      c.Type(dict, default={})),
        ('title',            c.Type(str, default="MkDocs App")),
        ('template',         c.Type(str, default=None)),
        ('outputs',          c.Type(list, default=["app.html"])),
        ('debug',            c.Type(bool, default=False)),
    )

    def __init__(self):
        super().__init__()
        # Other plugins tap into these from their own `on_config`.
        self.hooks = HtmlAssetsHooks()
        self._outputs: List[Dict[str, Any]] = []
        self._project_root: Path = Path.cwd()

    # -------------------------------
    # Helpers
    # -------------------------------

    def _dbg(self, msg: str, *args) -> None:
        """Debug log gated by plugin config.

        MkDocs only shows DEBUG when run with `-v/--verbose`.
        """
        if not self.config.get("debug", False):
            return
        logger.debug("[html_assets] " + msg, *args)

    def _normalize_outputs(self, outputs: List[Any]) -> List[Dict[str, Any]]:
        """Turn `outputs` into `{filename, template, title}` dicts, rejecting duplicates."""
        normalized: List[Dict[str, Any]] = []
        seen = set()
        for item in outputs:
            if isinstance(item, str):
                item = {"filename": item}
            if not isinstance(item, dict) or not item.get("filename"):
                raise ConfigurationError(f"Invalid output {item!r}: a filename is required")

            filename = str(item["filename"]).replace("\\", "/").lstrip("/")
            if filename in seen:
                raise ConfigurationError(f"Output '{filename}' is configured more than once")
            seen.add(filename)

            normalized.append({
                "filename": filename,
                "template": item.get("template") or self.config.get("template"),
                "title": item.get("title") or self.config.get("title"),
            })
        return normalized

    def _build_options(self, title: str, config: MkDocsConfig) -> HtmlAssetsOptions:
        return HtmlAssetsOptions(
            chunks=self.config["chunks"],
            exclude_chunks=list(self.config["exclude_chunks"]),
            chunks_sort_mode=self.config["chunks_sort_mode"],
            inject=self.config["inject"],
            hash=self.config["hash"],
            xhtml=self.config["xhtml"],
            meta=self.config["meta"],
            favicon=self.config["favicon"],
            minify=self.config["minify"],
            minify_opts=dict(self.config["minify_opts"]),
            title=title,
            template_parameters={"config": config},
        )

    def _load_template(self, template: Optional[str]) -> TemplateFunction:
        """Return a function rendering the Jinja2 template (or the default document)."""
        if not template:
            env = Environment(autoescape=False)
            compiled = env.from_string(DEFAULT_TEMPLATE)
        else:
            template_path = (self._project_root / template).resolve()
            env = Environment(loader=FileSystemLoader(str(template_path.parent)), autoescape=False)
            try:
                compiled = env.get_template(template_path.name)
            except TemplateNotFound:
                raise ConfigurationError(f"Template '{template}' not found (looked in {template_path.parent})")

        def _render(parameters: Dict[str, Any]) -> str:
            return compiled.render(**parameters)

        return _render

    def _entrypoints(self, config: MkDocsConfig) -> Dict[str, List[str]]:
        entries = self.config.get("entries") or {}
        if not entries:
            files = [str(item).lstrip("/") for key in ("js", "css") for item in config[EXTRAS[key]]]
            return {"main": files} if files else {}

        entrypoints: Dict[str, List[str]] = {}
        for name, files in entries.items():
            if isinstance(files, str):
                files = [files]
            entrypoints[str(name)] = [str(f).lstrip("/") for f in files]
        return entrypoints

    @staticmethod
    def _compilation_hash(site_dir: Path, entrypoints: Dict[str, List[str]]) -> str:
        """Hash of the entry file contents; changes whenever an asset changes."""
        digest = hashlib.sha384()
        for rel_path in sorted({f.split("?", 1)[0] for files in entrypoints.values() for f in files}):
            path = site_dir / rel_path
            digest.update(rel_path.encode("utf8"))
            if path.is_file():
                digest.update(path.read_bytes())
        return digest.hexdigest()[:20]

    def _copy_favicon(self, site_dir: Path) -> None:
        favicon = self.config.get("favicon")
        if not favicon:
            return
        source = (self._project_root / favicon).resolve()
        if not source.is_file():
            raise ConfigurationError(f"Favicon '{favicon}' not found")
        shutil.copyfile(source, site_dir / source.name)
        self._dbg("copied favicon %s", source.name)

    def build_compilation(self, config: MkDocsConfig) -> SiteCompilation:
        """Snapshot the built site for the HTML pipeline."""
        site_dir = Path(config["site_dir"])
        entrypoints = self._entrypoints(config)
        assets = {
            p.relative_to(site_dir).as_posix(): None
            for p in sorted(site_dir.rglob("*"))
            if p.is_file()
        }
        return SiteCompilation(
            entrypoints=entrypoints,
            hash=self._compilation_hash(site_dir, entrypoints),
            assets=assets,
            output_path=str(site_dir),
            public_path=self.config.get("public_path"),
            dependencies={str(k): list(v or []) for k, v in (self.config.get("dependencies") or {}).items()},
        )

    # -------------------------------
    # MkDocs hooks
    # -------------------------------

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        """Validate options that MkDocs' schema cannot express."""
        if config.get("config_file_path"):
            self._project_root = Path(config["config_file_path"]).resolve().parent

        self._outputs = self._normalize_outputs(self.config.get("outputs") or [])
        # Raises ConfigurationError for an invalid inject, chunks, favicon or minify_opts value
        self._build_options(self.config.get("title"), config)

        if not isinstance(self.config.get("entries") or {}, dict):
            raise ConfigurationError("'entries' must map entry names to file lists")
        self._dbg("outputs=%s", ",".join(o["filename"] for o in self._outputs))
        return config

    def on_post_build(self, *, config: MkDocsConfig) -> None:
        """After build: render every configured output and write it to site_dir."""
        if not self._outputs:
            return
        site_dir = Path(config["site_dir"])
        self._copy_favicon(site_dir)

        compilation = self.build_compilation(config)
        self._dbg("entries=%s hash=%s", list(compilation.entrypoints), compilation.hash)

        jobs = [
            OutputJob(
                output_name=output["filename"],
                options=self._build_options(output["title"], config),
                template_function=self._load_template(output["template"]),
            )
            for output in self._outputs
        ]
        asyncio.run(generate_all(compilation, self.hooks, jobs, plugin=self))
        self._dbg("done outputs=%d", len(jobs))
