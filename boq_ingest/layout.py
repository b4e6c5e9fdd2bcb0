"""
Text layout reconstruction.

Turns the positioned fragments of each page into plain text lines in
visual reading order: top to bottom, then left to right within a line.
"""

from functools import cmp_to_key
from typing import Iterable

from .config import LINE_Y_TOLERANCE
from .schemas import PositionedFragment, TextLine

PAGE_SEPARATOR = "\n\n"


def _reading_order(a: PositionedFragment, b: PositionedFragment) -> float:
    # Higher y is nearer the top of the page in PDF space
    dy = b.y - a.y
    if abs(dy) < LINE_Y_TOLERANCE:
        return a.x - b.x
    return dy


def sort_fragments(fragments: Iterable[PositionedFragment]) -> list[PositionedFragment]:
    """Sort fragments top to bottom; fragments within the tolerance band sort by x."""
    return sorted(fragments, key=cmp_to_key(_reading_order))


def group_lines(fragments: Iterable[PositionedFragment]) -> list[TextLine]:
    """
    Group sorted fragments into lines.

    A new line starts whenever a fragment's y differs from the previous
    fragment's y by more than the tolerance.
    """
    lines: list[TextLine] = []
    last_y = None

    for fragment in sort_fragments(fragments):
        if last_y is None or abs(fragment.y - last_y) > LINE_Y_TOLERANCE:
            lines.append(TextLine(y=fragment.y))
        lines[-1].fragments.append(fragment)
        last_y = fragment.y

    return lines


def reconstruct_page(fragments: Iterable[PositionedFragment]) -> str:
    """Render one page as newline-separated lines followed by the page separator."""
    lines = group_lines(fragments)
    return "\n".join(line.text for line in lines) + PAGE_SEPARATOR


def reconstruct_document(pages: Iterable[Iterable[PositionedFragment]]) -> str:
    """Concatenate reconstructed pages in the order given."""
    return "".join(reconstruct_page(fragments) for fragments in pages)


def split_lines(text: str) -> list[str]:
    return text.split("\n")
