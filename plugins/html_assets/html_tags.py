"""
Object representation of the HTML tags injected into generated documents.

Tags stay plain objects until the very last moment so hook listeners can
reorder them or change their attributes before they are turned into text.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

# Elements which never have a closing tag.
# See https://html.spec.whatwg.org/multipage/syntax.html#void-elements
VOID_TAGS = (
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
)

AttributeValue = Union[str, bool, None]


@dataclass
class HtmlTag:
    """A single HTML element.

    - tag_name: element name, e.g. "script"
    - void_tag: True for elements without closing tag (link, meta, ...)
    - attributes: ordered attribute mapping; True renders a bare attribute,
      False/None drops the attribute
    - entry: name of the entry point the tag was generated for, if any
    - inner_html: raw content between opening and closing tag
    """

    tag_name: str
    void_tag: bool = False
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    entry: Optional[str] = None
    inner_html: Optional[str] = None

    def __post_init__(self):
        if self.void_tag and self.inner_html:
            raise ValueError(f"Void tag <{self.tag_name}> cannot have inner html")

    def to_string(self, xhtml: bool = False) -> str:
        return html_tag_object_to_string(self, xhtml)

    def __str__(self) -> str:
        return self.to_string()


def create_html_tag(
    tag_name: str,
    attributes: Optional[Dict[str, AttributeValue]] = None,
    inner_html: Optional[str] = None,
    entry: Optional[str] = None,
) -> HtmlTag:
    """Build a tag, deriving `void_tag` from the element name."""
    return HtmlTag(
        tag_name=tag_name,
        void_tag=tag_name.lower() in VOID_TAGS,
        attributes=dict(attributes or {}),
        entry=entry,
        inner_html=inner_html,
    )


def _render_attribute(name: str, value: AttributeValue, xhtml: bool) -> str:
    if value is True:
        # XHTML does not allow minimized attributes
        return f'{name}="{name}"' if xhtml else name
    return f'{name}="{value}"'


def html_tag_object_to_string(tag: HtmlTag, xhtml: bool = False) -> str:
    """Serialize a tag, e.g. `<script src="main.js"></script>` or `<link href="a.css" rel="stylesheet">`.

    With `xhtml` enabled, void tags self-close as `<link ... />`.
    """
    attributes = [
        _render_attribute(name, value, xhtml)
        for name, value in (tag.attributes or {}).items()
        if value is not False and value is not None
    ]
    opening = " ".join([tag.tag_name] + attributes)

    if tag.void_tag:
        return f"<{opening} />" if xhtml else f"<{opening}>"

    return f"<{opening}>{tag.inner_html or ''}</{tag.tag_name}>"
