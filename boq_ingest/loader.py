"""
Document loader backed by pdfplumber.

Opens a PDF byte buffer and exposes its page count and, per page, the
positioned text fragments that the layout reconstructor consumes.
"""

import io
from typing import Optional

import pdfplumber

from .config import COLUMN_GAP, LINE_Y_TOLERANCE, logger
from .errors import LoadError
from .schemas import PositionedFragment


class LoadedPage:
    """A single page of an opened document."""

    def __init__(self, page, column_gap: float = COLUMN_GAP):
        self._page = page
        self._column_gap = column_gap

    def get_fragments(self) -> list[PositionedFragment]:
        """
        Return the page's text runs in PDF coordinate space.

        pdfplumber reports ``top``/``bottom`` measured from the top edge, so
        the baseline is flipped to ``page.height - bottom``. A blank fragment
        is inserted wherever two runs on the same row are separated by more
        than ``column_gap``; joined with single spaces this leaves a run of
        three spaces between table columns.
        """
        try:
            words = self._page.extract_words(keep_blank_chars=True)
        except Exception as e:
            raise LoadError(f"Could not read text on page {self._page.page_number}: {e}") from e

        height = float(self._page.height)
        fragments: list[PositionedFragment] = []
        previous: Optional[dict] = None

        for word in words:
            y = height - float(word["bottom"])
            if previous is not None:
                previous_y = height - float(previous["bottom"])
                gap = float(word["x0"]) - float(previous["x1"])
                if abs(y - previous_y) < LINE_Y_TOLERANCE and gap > self._column_gap:
                    fragments.append(PositionedFragment(text=" ", x=float(previous["x1"]), y=previous_y))
            fragments.append(PositionedFragment(text=word["text"], x=float(word["x0"]), y=y))
            previous = word

        return fragments


class LoadedDocument:
    """An opened PDF; close it (or use it as a context manager) when done."""

    def __init__(self, pdf):
        self._pdf = pdf

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def get_page(self, number: int) -> LoadedPage:
        """Return page ``number`` (1-based)."""
        if number < 1 or number > self.page_count:
            raise IndexError(f"Page {number} out of range (document has {self.page_count})")
        return LoadedPage(self._pdf.pages[number - 1])

    def close(self) -> None:
        self._pdf.close()

    def __enter__(self) -> "LoadedDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_document(pdf_bytes: bytes) -> LoadedDocument:
    """
    Open a PDF from raw bytes.

    Raises:
        LoadError: If the buffer is empty or is not a readable PDF
    """
    if not pdf_bytes:
        raise LoadError("Empty PDF bytes")

    try:
        pdf = pdfplumber.open(io.BytesIO(pdf_bytes))
    except Exception as e:
        logger.warning(f"Could not open PDF: {e}")
        raise LoadError(f"Not a readable PDF: {e}") from e

    try:
        # Page tree parsing is deferred by pdfplumber until first access
        _ = pdf.pages
    except Exception as e:
        pdf.close()
        logger.warning(f"Could not read PDF page tree: {e}")
        raise LoadError(f"Corrupt PDF: {e}") from e

    return LoadedDocument(pdf)
