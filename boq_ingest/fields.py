"""
Field extraction heuristics.

Each extractor takes the reconstructed document text, tries an ordered
list of patterns and returns the first match. A miss is not an error:
text fields come back as ``""`` and the total as ``0.0``.
"""

import logging
import re
from typing import Optional

from .config import (
    ADDRESS_LABEL,
    BARE_AMOUNT_RE,
    CLIENT_ATTENTION_LABEL,
    CLIENT_LABELS,
    CURRENCY_TOKEN_RE,
    DOCUMENT_TYPE_RE,
    KNOWN_PROJECT_TITLES,
    LOCATION_LABELS,
    RAND_AMOUNT_RE,
    TIER1_WINDOW,
    TOTAL_PATTERNS,
    VENDOR_SIGNATURES,
    logger,
)
from .layout import split_lines

_log = logger.getChild("fields")


# ============================================================================
# Helpers
# ============================================================================

def _find_line(lines: list[str], labels: list[str]) -> Optional[int]:
    """Index of the first line containing any of ``labels`` (case-insensitive)."""
    for i, line in enumerate(lines):
        lowered = line.lower()
        if any(label in lowered for label in labels):
            return i
    return None


def _text_after(line: str, labels: list[str]) -> str:
    """Text between the first label on ``line`` and the next label, stripped."""
    pattern = "|".join(re.escape(label) for label in labels)
    parts = re.split(pattern, line, flags=re.IGNORECASE)
    return parts[1].strip() if len(parts) > 1 else ""


def parse_amount(value: str) -> Optional[float]:
    """Parse a captured amount, dropping thousands separators and spaces."""
    try:
        return float(re.sub(r"[,\s]", "", value))
    except ValueError:
        return None


# ============================================================================
# Text Fields
# ============================================================================

def extract_company_name(text: str) -> str:
    """
    Company issuing the document.

    A known vendor signature anywhere in the text wins outright, since that
    vendor's header does not survive text extraction. Otherwise the first
    non-empty line among the first five that is not a document-type title.
    """
    for marker, name in VENDOR_SIGNATURES:
        if marker in text:
            return name

    for line in split_lines(text)[:5]:
        if line.strip() and not DOCUMENT_TYPE_RE.search(line):
            return line.strip()
    return ""


def extract_project_title(text: str) -> str:
    lines = split_lines(text)

    for line in lines:
        if line.strip() in KNOWN_PROJECT_TITLES:
            return line.strip()

    for line in lines:
        lowered = line.lower()
        if "project:" in lowered:
            return _text_after(line, ["project:"])
        if "project name:" in lowered:
            return _text_after(line, ["project name:"])
        if re.search(r"renovation", line, re.IGNORECASE):
            return line.strip()

    return ""


def extract_client_name(text: str) -> str:
    """Client from an ``Attention:`` line, else from a client/customer/bill-to label."""
    lines = split_lines(text)

    index = _find_line(lines, [CLIENT_ATTENTION_LABEL])
    if index is not None:
        match = re.search(r"attention:\s*([^\n]+)", lines[index], re.IGNORECASE)
        if match and match.group(1).strip():
            return match.group(1).strip()

    index = _find_line(lines, CLIENT_LABELS)
    if index is not None:
        return _text_after(lines[index], CLIENT_LABELS)

    return ""


def extract_location(text: str) -> str:
    """
    Site location.

    The text after ``Address:``; when the label stands alone the address is
    taken from the line below it.
    """
    lines = split_lines(text)

    index = _find_line(lines, [ADDRESS_LABEL])
    if index is not None and index + 1 < len(lines):
        address = _text_after(lines[index], [ADDRESS_LABEL])
        if address:
            return address
        return lines[index + 1].strip()

    index = _find_line(lines, LOCATION_LABELS)
    if index is not None:
        return _text_after(lines[index], LOCATION_LABELS)

    return ""


# ============================================================================
# Total Amount
# ============================================================================

def total_from_summary_block(lines: list[str], log: logging.Logger = _log) -> Optional[float]:
    """
    Look for a TOTAL line above both a VAT line and a SUB TOTAL line.

    Scans the last ``TIER1_WINDOW`` lines upwards. The markers are plain
    flags: once seen they stay set for the rest of the scan, whatever
    order they were met in.
    """
    found_sub_total = False
    found_vat = False

    for i in range(len(lines) - 1, max(0, len(lines) - TIER1_WINDOW) - 1, -1):
        line = lines[i].strip().upper()

        if "TOTAL" in line and "SUB" not in line and found_vat and found_sub_total:
            match = CURRENCY_TOKEN_RE.search(line)
            if match:
                amount = parse_amount(match.group(1))
                if amount is not None:
                    log.debug(f"Total after SUB TOTAL and VAT on line {i}: {amount}")
                    return amount
        elif "VAT" in line:
            found_vat = True
        elif "SUB TOTAL" in line or "SUBTOTAL" in line:
            found_sub_total = True

    return None


def total_from_labelled_line(lines: list[str], log: logging.Logger = _log) -> Optional[float]:
    """Last TOTAL line (not a subtotal or VAT line) matching a labelled pattern."""
    for i in range(len(lines) - 1, -1, -1):
        line = lines[i].strip()
        if not line:
            continue

        upper = line.upper()
        if "TOTAL" not in upper or "SUB TOTAL" in upper or "SUBTOTAL" in upper or "VAT" in upper:
            continue

        for label, pattern in TOTAL_PATTERNS:
            match = pattern.search(line)
            if match:
                amount = parse_amount(match.group(1))
                if amount is not None:
                    log.debug(f"Total on line {i} via pattern '{label}': {amount}")
                    return amount

        match = CURRENCY_TOKEN_RE.search(line)
        if match:
            amount = parse_amount(match.group(1))
            if amount is not None:
                log.debug(f"Total on line {i} via bare amount: {amount}")
                return amount

    return None


def total_from_last_amount(lines: list[str], log: logging.Logger = _log) -> Optional[float]:
    """Last currency-shaped amount anywhere in the document."""
    for i in range(len(lines) - 1, -1, -1):
        line = lines[i].strip()
        if not line:
            continue

        for pattern in (RAND_AMOUNT_RE, BARE_AMOUNT_RE):
            match = pattern.search(line)
            if match:
                amount = parse_amount(match.group(1))
                if amount is not None:
                    log.debug(f"Last-resort amount on line {i}: {amount}")
                    return amount

    return None


def extract_total_amount(text: str, log: Optional[logging.Logger] = None) -> float:
    """
    Final document total.

    Tries, in order: the SUB TOTAL / VAT / TOTAL block at the bottom of the
    document, the last labelled TOTAL line, then the last amount-shaped
    token. Returns ``0.0`` when every tier misses; callers should treat
    that as a failed extraction rather than a zero-value document.
    """
    log = log or _log
    lines = split_lines(text)

    for tier in (total_from_summary_block, total_from_labelled_line, total_from_last_amount):
        amount = tier(lines, log)
        if amount is not None:
            return amount

    log.debug("Failed to extract total amount")
    return 0.0
