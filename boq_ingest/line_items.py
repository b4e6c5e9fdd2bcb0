"""
Bill-of-quantities line item extraction.

The items table is located by its header row and ends at the first
totals row. Between the two, category header lines set the category of
the rows that follow and every other line is parsed as a row whose last
three columns are quantity, rate and amount. Columns are recovered by
splitting on runs of two or more spaces, so rows that do not align on
whitespace are skipped rather than guessed at.

Descriptions that themselves end in numbers (e.g. "2 coats") can be
misread as quantity columns; no attempt is made to detect that.
"""

import logging
import re
from enum import Enum
from typing import Optional

from .config import (
    BOQ_CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_UNIT,
    ITEM_HEADER_KEYWORDS,
    UNIT_ALIASES,
    logger,
)
from .layout import split_lines
from .schemas import BoQLineItem

_log = logger.getChild("line_items")

COLUMN_SPLIT_RE = re.compile(r"\s{2,}")


class ScanState(str, Enum):
    SEEKING_HEADER = "seeking_header"
    IN_ITEMS = "in_items"
    DONE = "done"


def is_items_header(line: str) -> bool:
    lowered = line.lower()
    return all(keyword in lowered for keyword in ITEM_HEADER_KEYWORDS)


def is_totals_row(line: str) -> bool:
    lowered = line.lower()
    return lowered.startswith("sub total") or "vat" in lowered or "total" in lowered


def match_category(line: str) -> Optional[str]:
    lowered = line.lower()
    matched = None
    for category in BOQ_CATEGORIES:
        if category.lower() in lowered:
            matched = category
    return matched


def parse_column_number(value: str) -> Optional[float]:
    """Parse a numeric column, ignoring everything but digits and dots."""
    try:
        return float(re.sub(r"[^\d.]", "", value))
    except ValueError:
        return None


def clean_description(description: str) -> str:
    description = re.sub(r"\(PC:[^)]+\)", "", description)
    description = re.sub(r"-\s*$", "", description)
    description = re.sub(r"^\s*-\s*", "", description)
    return re.sub(r"\s+", " ", description).strip()


def resolve_unit(columns: list[str]) -> tuple[str, str]:
    """
    Split the leading columns of a row into (description, unit).

    A column that is exactly a known unit token is taken as the unit
    column; failing that a literal ``m²`` inside the description is used.
    """
    for i, column in enumerate(columns):
        token = column.lower()
        if token in UNIT_ALIASES:
            description = " ".join(columns[:i] + columns[i + 1:])
            return description, UNIT_ALIASES[token]

    description = " ".join(columns)
    if "m²" in description:
        return description.replace("m²", "").strip(), "m²"
    return description, DEFAULT_UNIT


def parse_item_row(line: str, item_id: int, category: str) -> Optional[BoQLineItem]:
    """Parse one table row, or return None if it does not have the row shape."""
    columns = [part.strip() for part in COLUMN_SPLIT_RE.split(line) if part.strip()]
    if len(columns) < 4:
        return None

    numbers = [parse_column_number(column) for column in columns[-3:]]
    if any(number is None for number in numbers):
        return None
    quantity, rate, amount = numbers

    description, unit = resolve_unit(columns[:-3])
    description = clean_description(description)
    if not description:
        return None

    return BoQLineItem(
        id=item_id,
        description=description,
        unit=unit,
        quantity=quantity,
        rate=rate,
        amount=amount,
        category=category,
    )


def extract_line_items(text: str, log: Optional[logging.Logger] = None) -> list[BoQLineItem]:
    """
    Extract the bill of quantities from reconstructed document text.

    Args:
        text: Reconstructed document text
        log: Logger for per-row traces

    Returns:
        Items in document order with ids starting at 1; empty if no items
        header was found or no row parsed
    """
    log = log or _log
    items: list[BoQLineItem] = []
    state = ScanState.SEEKING_HEADER
    current_category = ""

    for line in split_lines(text):
        line = line.strip()

        if state is ScanState.SEEKING_HEADER:
            if is_items_header(line):
                state = ScanState.IN_ITEMS
            continue

        if not line or line == "-":
            continue

        if is_totals_row(line):
            state = ScanState.DONE
            break

        category = match_category(line)
        if category:
            current_category = category
            continue

        item = parse_item_row(line, len(items) + 1, current_category or DEFAULT_CATEGORY)
        if item is None:
            log.debug(f"Skipped row: {line}")
            continue

        log.debug(f"Item {item.id} ({item.category}): {item.description}")
        items.append(item)

    return items
