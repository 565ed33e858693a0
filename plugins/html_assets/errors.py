"""
Errors raised while assembling HTML documents.

All of them derive from MkDocs' `PluginError` so a failing pipeline is reported
as a regular build failure instead of a traceback.
"""

from mkdocs.exceptions import PluginError


class HtmlAssetsError(PluginError):
    """Base class for html_assets failures."""


class ConfigurationError(HtmlAssetsError):
    """Invalid plugin options (sort mode, meta tags, inject target, outputs...)."""


class TemplateExecutionError(HtmlAssetsError):
    """The template function did not produce an HTML string."""


class ListenerError(HtmlAssetsError):
    """A hook listener raised while processing an output file."""

    def __init__(self, hook_name: str, listener_name: str, error: BaseException):
        self.hook_name = hook_name
        self.listener_name = listener_name
        self.error = error
        super().__init__(f"Listener '{listener_name}' failed in hook '{hook_name}': {error}")
