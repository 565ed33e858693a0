"""
Options controlling how a single HTML output is assembled.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

import htmlmin

from .errors import ConfigurationError

# Comparator in the `cmp` style: negative, zero or positive.
SortFunction = Callable[[str, str], int]

INJECT_TARGETS = (True, False, "head", "body")

# Keyword arguments accepted by `htmlmin.Minifier`.
HTMLMIN_KEYS = frozenset(inspect.signature(htmlmin.Minifier).parameters)


def default_minify_opts() -> Dict[str, Any]:
    """htmlmin settings for generated documents.

    Comments and blank space between tags are dropped, attribute quotes kept.
    """
    return {
        "remove_comments": True,
        "remove_empty_space": True,
        "remove_optional_attribute_quotes": False,
    }


@dataclass
class HtmlAssetsOptions:
    """Per-output options; mirrors the plugin keys in mkdocs.yml.

    `minify_opts` holds the user overrides on construction and the complete
    htmlmin keyword set (defaults included) afterwards.
    """

    chunks: Union[str, List[str]] = "all"
    exclude_chunks: List[str] = field(default_factory=list)
    chunks_sort_mode: Union[str, SortFunction] = "auto"
    inject: Union[bool, str] = True
    hash: bool = False
    xhtml: bool = False
    meta: Union[bool, Dict[str, Any], None] = field(default_factory=dict)
    favicon: Union[bool, str, None] = False
    minify: bool = False
    minify_opts: Dict[str, Any] = field(default_factory=dict)
    title: str = "MkDocs App"
    template_parameters: Union[bool, Dict[str, Any], Callable[..., Dict[str, Any]], None] = None

    def __post_init__(self):
        if self.inject not in INJECT_TARGETS:
            raise ConfigurationError(
                f'"{self.inject}" is not a valid inject target, use one of true, false, "head" or "body"'
            )
        if self.chunks != "all" and not isinstance(self.chunks, list):
            raise ConfigurationError('"chunks" must be "all" or a list of entry names')
        if self.favicon not in (False, None) and not isinstance(self.favicon, str):
            raise ConfigurationError(f'"favicon" must be a file path or false, got {self.favicon!r}')

        unknown = sorted(set(self.minify_opts) - HTMLMIN_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown htmlmin option(s) in 'minify_opts': {', '.join(unknown)}")
        self.minify_opts = {**default_minify_opts(), **self.minify_opts}

    @property
    def script_target(self) -> str:
        """Scripts go to the body unless explicitly placed in the head."""
        return "head" if self.inject == "head" else "body"


def optional_str(value: Any) -> Optional[str]:
    """Treat `False`/empty values as "disabled"."""
    if value is False or value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"Expected a string or false, got {value!r}")
    return value
