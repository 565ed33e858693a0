"""
Built-in strategies to order entry names before their assets are collected.

Every sorter has the signature `(entry_names, compilation, options) -> entry_names`
and must not modify the list it receives.
"""

import logging
from typing import Callable, Dict, List

from .errors import ConfigurationError

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")


def none(entry_names: List[str], compilation, options) -> List[str]:
    """Keep the order in which the build declared its entries."""
    return list(entry_names)


def auto(entry_names: List[str], compilation, options) -> List[str]:
    # Entries are already declared in load order by the build.
    return list(entry_names)


def manual(entry_names: List[str], compilation, options) -> List[str]:
    """Follow the order of the `chunks` include list."""
    chunks = getattr(options, "chunks", "all")
    if not isinstance(chunks, list):
        return list(entry_names)
    available = set(entry_names)
    return [name for name in chunks if name in available]


def alphabetical(entry_names: List[str], compilation, options) -> List[str]:
    return sorted(entry_names)


def dependency(entry_names: List[str], compilation, options) -> List[str]:
    """Topological order: entries come after the entries they depend on.

    Ties keep the incoming order. Dependencies on entries which are not part of
    `entry_names` (filtered out, unknown) are ignored.
    """
    graph: Dict[str, List[str]] = getattr(compilation, "dependencies", None) or {}
    available = set(entry_names)
    pending: Dict[str, set] = {
        name: {dep for dep in graph.get(name, []) if dep in available and dep != name}
        for name in entry_names
    }

    result: List[str] = []
    while pending:
        ready = [name for name in entry_names if name in pending and not pending[name]]
        if not ready:
            cycle = ", ".join(name for name in entry_names if name in pending)
            raise ConfigurationError(f"Cyclic dependency between entries: {cycle}")
        # Take only the first ready entry so ties respect the incoming order
        name = ready[0]
        result.append(name)
        del pending[name]
        for deps in pending.values():
            deps.discard(name)

    logger.debug("dependency order: %s", result)
    return result


SORTERS: Dict[str, Callable[..., List[str]]] = {
    "none": none,
    "auto": auto,
    "manual": manual,
    "alphabetical": alphabetical,
    "dependency": dependency,
}
