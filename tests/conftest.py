"""
Shared fixtures for the test suite.
"""

import io

import pytest
from pypdf import PdfWriter

from boq_ingest.schemas import PositionedFragment


def make_pdf(page_count: int = 1) -> bytes:
    """Build a PDF with ``page_count`` blank US-letter pages."""
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def lines_to_fragments(lines: list[str], top: float = 800, step: float = 14) -> list[PositionedFragment]:
    """One fragment per line, stacked downwards from ``top``."""
    return [
        PositionedFragment(text=line, x=50, y=top - i * step)
        for i, line in enumerate(lines)
    ]


class FakePage:
    def __init__(self, fragments):
        self._fragments = fragments

    def get_fragments(self):
        return list(self._fragments)


class FakeDocument:
    """Stands in for LoadedDocument with pre-built fragments per page."""

    def __init__(self, pages):
        self.pages = pages
        self.requested: list[int] = []

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def get_page(self, number: int) -> FakePage:
        self.requested.append(number)
        return FakePage(self.pages[number - 1])

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return None


SAMPLE_QUOTE_LINES = [
    "ACME CO",
    "",
    "DESCRIPTION UNIT QTY RATE TOTAL",
    "Tiling installation",
    "Floor tiles   m²   5   240.00   1200.00",
    "SUB TOTAL   1200.00",
    "VAT   180.00",
    "TOTAL   1380.00",
]


@pytest.fixture
def blank_pdf() -> bytes:
    return make_pdf(1)


@pytest.fixture
def sample_quote_text() -> str:
    return "\n".join(SAMPLE_QUOTE_LINES)
