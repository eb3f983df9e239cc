"""Tests for table region detection in serialized Markdown."""

import pytest

from escapade.scanners.table import TableRegion, find_table_regions, table_line_mask

DOCUMENT = [
    "Regular \\* text",
    "",
    "| a | b |",
    "| --- | --- |",
    "| 1 | 2 |",
    "",
    "after | x",
]


class TestFindTableRegions:
    def test_region_spans_header_to_last_row(self) -> None:
        assert find_table_regions(DOCUMENT) == [TableRegion(2, 4)]

    def test_rows_without_delimiter_are_not_a_table(self) -> None:
        assert find_table_regions(["| a | b |", "| c | d |"]) == []

    def test_single_pipe_prose_never_opens(self) -> None:
        assert find_table_regions(["a | b", "| - |"]) == []

    def test_pipeless_delimiter_is_a_thematic_break(self) -> None:
        assert find_table_regions(["| a | b |", "---"]) == []

    def test_region_closes_at_first_non_row(self) -> None:
        lines = ["| a | b |", "|---|---|", "| 1 | 2 |", "plain", "| x | y |"]
        assert find_table_regions(lines) == [TableRegion(0, 2)]

    def test_two_tables(self) -> None:
        lines = ["| a | b |", "| - | - |", "", "| c | d |", "| - | - |"]
        assert find_table_regions(lines) == [TableRegion(0, 1), TableRegion(3, 4)]

    @pytest.mark.parametrize("lines", [[], ["| a | b |"], [""]])
    def test_degenerate_input(self, lines: list[str]) -> None:
        assert find_table_regions(lines) == []


class TestTableLineMask:
    def test_mask(self) -> None:
        assert table_line_mask(DOCUMENT) == [False, False, True, True, True, False, False]

    def test_region_contains(self) -> None:
        region = TableRegion(2, 4)
        assert region.contains(2)
        assert region.contains(4)
        assert not region.contains(5)
