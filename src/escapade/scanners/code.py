r"""Code fence and code span detection in serialized Markdown.

Text passes rewrite escapes and raw HTML, but code is written verbatim and
must come back unchanged. This module finds the parts of a Markdown string
that are code so the passes can step around them:

- Fenced code: from an opening ````` or ``~~~`` fence to its closing fence
  (or the end of the text), fence lines included. Quote markers, list
  markers and indentation in front of a fence are ignored, so fences inside
  block quotes and list items count.
- Code spans: a backtick run closed by the next run of the same length on
  the same line. A backtick after an odd number of backslashes is escaped
  and cannot open a span.

Indented code blocks are not detected; the serializer always writes fences.

Example:
    >>> map_outside_code("a `\\*` \\*", lambda s: s.replace("\\*", "*"))
    'a `\\*` *'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

_CONTAINER_PREFIX = re.compile(r"^(?:[ \t]*(?:>|[-*+](?=[ \t])|\d{1,9}[.)](?=[ \t])))*[ \t]*")
_FENCE_OPEN = re.compile(r"^(`{3,}|~{3,})(.*)$")
_BACKTICK_RUN = re.compile(r"`+")


def _fence_body(line: str) -> str:
    return _CONTAINER_PREFIX.sub("", line, count=1)


def fenced_code_mask(lines: Sequence[str]) -> list[bool]:
    """Per-line flags: True for fence lines and the lines between them."""
    mask = [False] * len(lines)
    fence: str | None = None
    for index, line in enumerate(lines):
        body = _fence_body(line)
        if fence is None:
            match = _FENCE_OPEN.match(body)
            # A backtick fence's info string cannot contain backticks
            if match and not (match.group(1)[0] == "`" and "`" in match.group(2)):
                fence = match.group(1)
                mask[index] = True
            continue
        mask[index] = True
        closing = body.rstrip()
        if closing.startswith(fence) and not closing.strip(fence[0]):
            fence = None
    return mask


def code_span_ranges(line: str) -> list[tuple[int, int]]:
    """Half-open ``(start, end)`` offsets of the code spans on one line."""
    ranges: list[tuple[int, int]] = []
    pos = 0
    while (opener := _BACKTICK_RUN.search(line, pos)) is not None:
        start, run = opener.start(), opener.group()
        preceding = line[:start]
        if (len(preceding) - len(preceding.rstrip("\\"))) % 2:
            start, run = start + 1, run[1:]
            if not run:
                pos = opener.end()
                continue
        closer = _BACKTICK_RUN.search(line, opener.end())
        while closer is not None and closer.group() != run:
            closer = _BACKTICK_RUN.search(line, closer.end())
        if closer is None:
            pos = opener.end()
            continue
        ranges.append((start, closer.end()))
        pos = closer.end()
    return ranges


def code_ranges(markdown: str) -> list[tuple[int, int]]:
    """Half-open offsets of every fenced block and code span in markdown.

    Ranges are sorted and never overlap. Consecutive fenced lines form one
    range that includes the newlines between them.
    """
    lines = markdown.split("\n")
    fenced = fenced_code_mask(lines)
    ranges: list[tuple[int, int]] = []
    offset = 0
    for line, in_fence in zip(lines, fenced, strict=True):
        end = offset + len(line)
        if in_fence:
            if ranges and ranges[-1][1] == offset - 1:
                ranges[-1] = (ranges[-1][0], end)
            else:
                ranges.append((offset, end))
        else:
            ranges.extend((offset + start, offset + stop) for start, stop in code_span_ranges(line))
        offset = end + 1
    return ranges


def _map_outside(text: str, ranges: list[tuple[int, int]], fn: Callable[[str], str]) -> str:
    if not ranges:
        return fn(text)
    pieces: list[str] = []
    pos = 0
    for start, end in ranges:
        pieces.append(fn(text[pos:start]))
        pieces.append(text[start:end])
        pos = end
    pieces.append(fn(text[pos:]))
    return "".join(pieces)


def map_outside_code(markdown: str, fn: Callable[[str], str]) -> str:
    """Apply fn to every stretch of markdown that is not code."""
    return _map_outside(markdown, code_ranges(markdown), fn)


def map_outside_code_spans(line: str, fn: Callable[[str], str]) -> str:
    """Apply fn to the parts of one line that are not inside code spans."""
    return _map_outside(line, code_span_ranges(line), fn)


__all__ = [
    "code_ranges",
    "code_span_ranges",
    "fenced_code_mask",
    "map_outside_code",
    "map_outside_code_spans",
]
