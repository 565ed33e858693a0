"""
Template execution and text based tag injection.

The rendered template is treated as plain text: tags are spliced in front of
`</head>` / `</body>` with regular expressions, no DOM is built.
"""

import logging
import re
from typing import Any, Callable, Dict, Optional

import htmlmin

from .errors import TemplateExecutionError
from .html_tags import html_tag_object_to_string
from .tag_generators import TagGroups

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

HTML_RE = re.compile(r"(<html[^>]*>)", re.IGNORECASE)
HTML_OPEN_RE = re.compile(r"(<html[^>]*)(>)", re.IGNORECASE)
HEAD_CLOSE_RE = re.compile(r"(</head\s*>)", re.IGNORECASE)
BODY_CLOSE_RE = re.compile(r"(</body\s*>)", re.IGNORECASE)
MANIFEST_ATTR_RE = re.compile(r"\smanifest\s*=", re.IGNORECASE)

TemplateFunction = Callable[[Dict[str, Any]], str]


def render_html(template_function: TemplateFunction, template_parameters: Dict[str, Any]) -> str:
    """Execute the template. Errors raised by the template propagate unchanged."""
    html = template_function(template_parameters)
    if not isinstance(html, str):
        raise TemplateExecutionError(
            f"The template function returned {type(html).__name__} instead of an HTML string"
        )
    return html


def inject_tags_into_html(html: str, tag_groups: TagGroups, xhtml: bool = False) -> str:
    """Place head tags before `</head>` and body tags before `</body>`.

    Missing anchors are not an error: body tags are appended to the document
    and an empty `<head></head>` is created after `<html>` (or at the very
    start of the document) before head tags are placed.
    """
    head = "".join(html_tag_object_to_string(tag, xhtml) for tag in tag_groups.head_tags)
    body = "".join(html_tag_object_to_string(tag, xhtml) for tag in tag_groups.body_tags)

    if body:
        if BODY_CLOSE_RE.search(html):
            html = BODY_CLOSE_RE.sub(lambda m: body + m.group(1), html, count=1)
        else:
            html += body

    if head:
        if not HEAD_CLOSE_RE.search(html):
            if HTML_RE.search(html):
                html = HTML_RE.sub(lambda m: m.group(1) + "<head></head>", html, count=1)
            else:
                html = "<head></head>" + html
        html = HEAD_CLOSE_RE.sub(lambda m: head + m.group(1), html, count=1)

    return html


def inject_manifest(manifest: Optional[str], html: str) -> str:
    """Add `manifest="..."` to the first `<html>` tag unless it already has one."""
    if not manifest:
        return html

    def _add_manifest(m: re.Match) -> str:
        if MANIFEST_ATTR_RE.search(m.group(0)):
            return m.group(0)
        return f'{m.group(1)} manifest="{manifest}"{m.group(2)}'

    return HTML_OPEN_RE.sub(_add_manifest, html, count=1)


def minify_html(html: str, minify_opts: Dict[str, Any]) -> str:
    """Minify HTML with the resolved `HtmlAssetsOptions.minify_opts`."""
    logger.debug("minify with %s", sorted(k for k, v in minify_opts.items() if v is True))
    return htmlmin.minify(html, **minify_opts)
