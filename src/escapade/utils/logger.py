"""Logging helpers for Escapade.

Every module logs through ``get_logger(__name__)``, so all records sit under
the ``escapade`` namespace and one switch turns them on:

    >>> import logging
    >>> logging.getLogger("escapade").setLevel(logging.DEBUG)

The library never installs handlers.

Pass tracing:
    Text passes are silent rewrites, which makes "where did my backslash
    go?" hard to answer. ``log_pass_result`` records, at DEBUG, each pass
    that changed the serializer output and how many lines it touched.
"""

from __future__ import annotations

import logging

ROOT_LOGGER = "escapade"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the escapade namespace.

    Example:
        >>> get_logger("mymodule").name
        'escapade.mymodule'
    """
    if not (name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + ".")):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def count_changed_lines(before: str, after: str) -> int:
    """Number of line positions whose text differs, plus any added or removed."""
    old = before.split("\n")
    new = after.split("\n")
    changed = sum(1 for a, b in zip(old, new, strict=False) if a != b)
    return changed + abs(len(old) - len(new))


def log_pass_result(logger: logging.Logger, pass_name: str, before: str, after: str) -> None:
    """Log at DEBUG that pass_name rewrote the text, if it changed anything."""
    if before == after or not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        "Pass %r changed %d line(s)", pass_name, count_changed_lines(before, after)
    )


__all__ = [
    "ROOT_LOGGER",
    "count_changed_lines",
    "get_logger",
    "log_pass_result",
]
