"""
Interception points of the HTML pipeline.

Other MkDocs plugins can tap into them to rewrite the in-flight data of an
output file, e.g. from their own `on_config`:

    html_assets = config.plugins["html_assets"]
    html_assets.hooks.alter_asset_tag_groups.tap("my-plugin", add_analytics)

A listener receives the payload dict and returns the (possibly replaced)
payload. Returning None keeps the payload it was given; a returned payload must
keep every key it was given. Listeners may be plain functions or coroutine
functions.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ListenerError

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

Payload = Dict[str, Any]
Listener = Callable[[Payload], Union[Optional[Payload], Awaitable[Optional[Payload]]]]


class AsyncSeriesWaterfallHook:
    """Runs listeners one after another, each one getting the previous result."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: List[Tuple[str, Listener]] = []

    def tap(self, listener_name: str, listener: Listener) -> None:
        """Register `listener`. Tapping an existing name replaces it in place,
        so plugins re-running `on_config` (mkdocs serve) do not stack up."""
        for i, (name, _) in enumerate(self._listeners):
            if name == listener_name:
                self._listeners[i] = (listener_name, listener)
                return
        self._listeners.append((listener_name, listener))

    def untap(self, listener_name: str) -> None:
        self._listeners = [(n, fn) for n, fn in self._listeners if n != listener_name]

    @property
    def listener_names(self) -> List[str]:
        return [n for n, _ in self._listeners]

    async def call(self, payload: Payload) -> Payload:
        for listener_name, listener in list(self._listeners):
            logger.debug("hook %s -> %s", self.name, listener_name)
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                raise ListenerError(self.name, listener_name, e) from e
            if result is None:
                continue
            if not isinstance(result, Mapping):
                raise ListenerError(
                    self.name, listener_name, TypeError(f"expected a payload dict, got {type(result).__name__}")
                )
            missing = [key for key in payload if key not in result]
            if missing:
                raise ListenerError(self.name, listener_name, KeyError(f"payload lost {', '.join(missing)}"))
            payload = result
        return payload


class HtmlAssetsHooks:
    """The six interception points, in pipeline order."""

    NAMES = (
        "before_asset_tag_generation",
        "alter_asset_tags",
        "alter_asset_tag_groups",
        "after_template_execution",
        "before_emit",
        "after_emit",
    )

    def __init__(self):
        self.before_asset_tag_generation = AsyncSeriesWaterfallHook("before_asset_tag_generation")
        self.alter_asset_tags = AsyncSeriesWaterfallHook("alter_asset_tags")
        self.alter_asset_tag_groups = AsyncSeriesWaterfallHook("alter_asset_tag_groups")
        self.after_template_execution = AsyncSeriesWaterfallHook("after_template_execution")
        self.before_emit = AsyncSeriesWaterfallHook("before_emit")
        self.after_emit = AsyncSeriesWaterfallHook("after_emit")

    def __getitem__(self, name: str) -> AsyncSeriesWaterfallHook:
        if name not in self.NAMES:
            raise KeyError(name)
        return getattr(self, name)
