"""Portable block splitter.

Splits Markdown text into logical block spans without building a tree.
Useful where only block boundaries matter (per-block editing, diffing,
highlighting) and a full parse would be wasted work.

This is line classification, not CommonMark parsing: there is no nesting,
and lazy continuation is only honoured for paragraphs.

Example:
    >>> [span.type for span in split_blocks("# Title\\n\\nSome text")]
    ['heading', 'paragraph']
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from escapade.classifiers.html import classify_block_start
from escapade.classifiers.table import is_table_row_text, validate_table
from escapade.scanners.html import find_block_end


class BlockType(StrEnum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    UNORDERED_LIST = "unordered_list"
    ORDERED_LIST = "ordered_list"
    TABLE = "table"
    HORIZONTAL_RULE = "horizontal_rule"
    HTML_BLOCK = "html_block"


@dataclass(frozen=True, slots=True)
class BlockSpan:
    """One block of source text with its inclusive line range."""

    type: BlockType
    content: str
    start_line: int
    end_line: int
    meta: dict[str, object] = field(default_factory=dict)

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


_HEADING = re.compile(r"^(#{1,6})\s+")
_FENCE = re.compile(r"^(`{3,}|~{3,})([\w+-]*)\s*$")
_INDENTED_CODE = re.compile(r"^(?: {4}|\t)")
_BLOCKQUOTE = re.compile(r"^>\s?")
_UNORDERED_ITEM = re.compile(r"^\s*[-*+]\s+")
_ORDERED_ITEM = re.compile(r"^\s*\d+[.)]\s+")
_HORIZONTAL_RULE = re.compile(r"^(?:([-*_])\s*)(?:\1\s*){2,}$")
_LIST_CONTINUATION = re.compile(r"^(?:  |\t)")

# Line kinds that are not block types of their own
_BLANK = "blank"
_FENCED = "fenced_code"
_INDENTED = "indented_code"


def _line_kind(line: str) -> str:
    if not line.strip():
        return _BLANK
    if _HEADING.match(line):
        return BlockType.HEADING
    if _FENCE.match(line):
        return _FENCED
    if _HORIZONTAL_RULE.match(line.strip()):
        return BlockType.HORIZONTAL_RULE
    if _BLOCKQUOTE.match(line):
        return BlockType.BLOCKQUOTE
    if _UNORDERED_ITEM.match(line):
        return BlockType.UNORDERED_LIST
    if _ORDERED_ITEM.match(line):
        return BlockType.ORDERED_LIST
    if _INDENTED_CODE.match(line):
        return _INDENTED
    if is_table_row_text(line):
        return BlockType.TABLE
    if classify_block_start(line) is not None:
        return BlockType.HTML_BLOCK
    return BlockType.PARAGRAPH


def _span(
    block_type: BlockType, lines: list[str], start: int, end: int, **meta: object
) -> BlockSpan:
    return BlockSpan(block_type, "\n".join(lines[start : end + 1]), start, end, meta)


def _scan_list(lines: list[str], start: int, item: re.Pattern[str]) -> int:
    """Return the index one past the last line of the list starting at start."""
    index = start
    total = len(lines)
    while index < total:
        line = lines[index]
        if not line.strip():
            ahead = index + 1
            while ahead < total and not lines[ahead].strip():
                ahead += 1
            if ahead < total and (
                item.match(lines[ahead]) or _LIST_CONTINUATION.match(lines[ahead])
            ):
                index += 1
                continue
            break
        if not item.match(line) and not _LIST_CONTINUATION.match(line):
            break
        index += 1
    return index


def split_blocks(markdown: str) -> list[BlockSpan]:
    """Split markdown into block spans in document order.

    Blank lines separate blocks and never produce spans of their own.

    Args:
        markdown: Markdown source

    Returns:
        List of BlockSpan
    """
    if not markdown:
        return []

    lines = markdown.split("\n")
    total = len(lines)
    spans: list[BlockSpan] = []
    index = 0

    while index < total:
        line = lines[index]
        kind = _line_kind(line)

        if kind == _BLANK:
            index += 1
            continue

        start = index

        if kind == _FENCED:
            match = _FENCE.match(line)
            assert match is not None
            fence, language = match.group(1), match.group(2)
            index += 1
            while index < total and not lines[index].lstrip().startswith(fence):
                index += 1
            end = min(index, total - 1)
            spans.append(
                _span(BlockType.CODE_BLOCK, lines, start, end, language=language, fenced=True)
            )
            index = end + 1
            continue

        if kind == BlockType.HEADING:
            match = _HEADING.match(line)
            assert match is not None
            spans.append(_span(BlockType.HEADING, lines, start, start, level=len(match.group(1))))
            index += 1
            continue

        if kind == BlockType.HORIZONTAL_RULE:
            spans.append(_span(BlockType.HORIZONTAL_RULE, lines, start, start))
            index += 1
            continue

        if kind == BlockType.BLOCKQUOTE:
            index += 1
            while index < total and (
                _BLOCKQUOTE.match(lines[index])
                or _line_kind(lines[index]) in (BlockType.PARAGRAPH, _INDENTED)
            ):
                index += 1
            spans.append(_span(BlockType.BLOCKQUOTE, lines, start, index - 1))
            continue

        if kind in (BlockType.UNORDERED_LIST, BlockType.ORDERED_LIST):
            item = _UNORDERED_ITEM if kind == BlockType.UNORDERED_LIST else _ORDERED_ITEM
            index = _scan_list(lines, start, item)
            spans.append(_span(BlockType(kind), lines, start, index - 1))
            continue

        if kind == BlockType.TABLE:
            while index < total and is_table_row_text(lines[index]):
                index += 1
            shape = validate_table("\n".join(lines[start:index]))
            spans.append(
                _span(
                    BlockType.TABLE,
                    lines,
                    start,
                    index - 1,
                    valid=shape.is_valid,
                    row_count=index - start,
                    column_count=shape.column_count,
                )
            )
            continue

        if kind == BlockType.HTML_BLOCK:
            block_type = classify_block_start(line)
            assert block_type is not None
            end = find_block_end(lines, start, block_type)
            spans.append(_span(BlockType.HTML_BLOCK, lines, start, end, html_type=int(block_type)))
            index = end + 1
            continue

        if kind == _INDENTED:
            while index < total and (_INDENTED_CODE.match(lines[index]) or not lines[index].strip()):
                index += 1
            end = index - 1
            while end > start and not lines[end].strip():
                end -= 1
            spans.append(_span(BlockType.CODE_BLOCK, lines, start, end, fenced=False))
            continue

        # Paragraph: indented lines are lazy continuations, not code
        index += 1
        while index < total and _line_kind(lines[index]) in (BlockType.PARAGRAPH, _INDENTED):
            index += 1
        spans.append(_span(BlockType.PARAGRAPH, lines, start, index - 1))

    return spans


def block_types(markdown: str) -> list[str]:
    """Return just the block type names of markdown, in order."""
    return [str(span.type) for span in split_blocks(markdown)]


def blocks_of_type(markdown: str, types: str | Iterable[str]) -> list[BlockSpan]:
    """Return the spans whose type is one of types."""
    wanted = {types} if isinstance(types, str) else set(types)
    return [span for span in split_blocks(markdown) if span.type in wanted]


__all__ = ["BlockSpan", "BlockType", "block_types", "blocks_of_type", "split_blocks"]
