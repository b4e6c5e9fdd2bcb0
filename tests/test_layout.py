"""
Tests for text layout reconstruction.
"""

from boq_ingest.layout import group_lines, reconstruct_document, reconstruct_page, sort_fragments
from boq_ingest.schemas import PositionedFragment


def frag(text: str, x: float, y: float) -> PositionedFragment:
    return PositionedFragment(text=text, x=x, y=y)


class TestSortFragments:
    """Tests for reading-order sorting."""

    def test_higher_y_comes_first(self):
        result = sort_fragments([frag("bottom", 10, 100), frag("top", 10, 700)])
        assert [f.text for f in result] == ["top", "bottom"]

    def test_same_band_sorted_by_x(self):
        result = sort_fragments([frag("right", 300, 700), frag("left", 20, 702)])
        assert [f.text for f in result] == ["left", "right"]

    def test_identical_y_sorted_by_x(self):
        result = sort_fragments([frag("c", 30, 500), frag("a", 10, 500), frag("b", 20, 500)])
        assert [f.text for f in result] == ["a", "b", "c"]


class TestGroupLines:
    """Tests for grouping fragments into lines."""

    def test_fragments_within_tolerance_share_a_line(self):
        lines = group_lines([frag("Floor", 10, 700), frag("tiles", 60, 697)])
        assert len(lines) == 1
        assert lines[0].text == "Floor tiles"

    def test_fragments_beyond_tolerance_split(self):
        lines = group_lines([frag("first", 10, 700), frag("second", 10, 680)])
        assert [line.text for line in lines] == ["first", "second"]

    def test_swapping_vertical_positions_swaps_lines(self):
        before = group_lines([frag("A", 50, 700), frag("B", 10, 694)])
        after = group_lines([frag("A", 50, 694), frag("B", 10, 700)])
        assert [line.text for line in before] == ["A", "B"]
        assert [line.text for line in after] == ["B", "A"]

    def test_gap_of_exactly_tolerance_joins_in_y_order(self):
        lines = group_lines([frag("left", 10, 695), frag("right", 300, 700)])
        assert [line.text for line in lines] == ["right left"]

    def test_empty_input(self):
        assert group_lines([]) == []


class TestReconstructPage:
    """Tests for page text rendering."""

    def test_lines_and_separator(self):
        text = reconstruct_page([
            frag("TOTAL", 10, 100),
            frag("ACME", 10, 780),
            frag("CO", 60, 781),
        ])
        assert text == "ACME CO\nTOTAL\n\n"

    def test_empty_page_contributes_separator_only(self):
        assert reconstruct_page([]) == "\n\n"

    def test_blank_fragment_widens_column_gap(self):
        text = reconstruct_page([
            frag("Floor tiles", 10, 500),
            frag(" ", 80, 500),
            frag("m²", 120, 500),
        ])
        assert text.split("\n")[0] == "Floor tiles   m²"


class TestReconstructDocument:
    """Tests for multi-page reconstruction."""

    def test_pages_kept_in_order(self):
        text = reconstruct_document([
            [frag("page one", 10, 700)],
            [],
            [frag("page three", 10, 700)],
        ])
        assert text == "page one\n\n\n\npage three\n\n"
