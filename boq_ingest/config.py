"""
Configuration constants for the BoQ ingestion service.
"""

import logging
import os
import re
from typing import Final

# ============================================================================
# Layout Reconstruction
# ============================================================================

# Fragments whose baselines differ by less than this many page units share a line
LINE_Y_TOLERANCE: Final[float] = float(os.getenv("LINE_Y_TOLERANCE", "5"))

# Horizontal gap between two words on a row that the loader treats as a column break
COLUMN_GAP: Final[float] = float(os.getenv("COLUMN_GAP", "10"))

# ============================================================================
# Field Extraction
# ============================================================================

# (marker, canonical company name); the marker is matched case-sensitively
VENDOR_SIGNATURES: Final[list[tuple[str, str]]] = [
    ("BUILDING SERVICES", "PTP BUILDING SERVICES"),
]

# Title lines recognised verbatim before the generic "project:" search
KNOWN_PROJECT_TITLES: Final[list[str]] = [
    "Bathroom Renovation",
]

# Words that disqualify a header line from being the company name
DOCUMENT_TYPE_RE: Final[re.Pattern] = re.compile(r"invoice|quotation|estimate", re.IGNORECASE)

CLIENT_ATTENTION_LABEL: Final[str] = "attention:"
CLIENT_LABELS: Final[list[str]] = ["client:", "customer:", "bill to:"]

ADDRESS_LABEL: Final[str] = "address:"
LOCATION_LABELS: Final[list[str]] = ["location:", "site:", "address:"]

# ============================================================================
# Total Amount
# ============================================================================

# Number of trailing lines searched for the SUB TOTAL / VAT / TOTAL block
TIER1_WINDOW: Final[int] = 30

# Currency-shaped token: optional rand sign, digits with separators, two decimals
CURRENCY_TOKEN_RE: Final[re.Pattern] = re.compile(r"[R]?\s*(\d[\d,\s]*\.\d{2})")
RAND_AMOUNT_RE: Final[re.Pattern] = re.compile(r"R\s*(\d[\d,\s]*\.\d{2})")
BARE_AMOUNT_RE: Final[re.Pattern] = re.compile(r"(\d[\d,\s]*\.\d{2})")

_AMOUNT = r"([\d,]+\.\d{2})"

# Qualifiers tried after "TOTAL", in priority order
_TOTAL_QUALIFIERS = [
    "INCL", "EXCL", "DUE", "PRICE", "COST", "INVOICE", "QUOTATION", "QUOTE",
    "ESTIMATE", "PAYMENT", "BALANCE", "OUTSTANDING", "PAYABLE",
]
_TOTAL_AMOUNT_QUALIFIERS = [
    "PAYABLE", "DUE", "OUTSTANDING", "QUOTED", "ESTIMATED", "INVOICED",
]

# Labelled total patterns, tried in order on each candidate TOTAL line
TOTAL_PATTERNS: Final[list[tuple[str, re.Pattern]]] = [
    ("total", re.compile(rf"TOTAL\s*[^\d]*{_AMOUNT}", re.IGNORECASE)),
    ("total_rand", re.compile(rf"TOTAL\s*R\s*{_AMOUNT}", re.IGNORECASE)),
    ("rand_then_total", re.compile(rf"R\s*{_AMOUNT}\s*TOTAL", re.IGNORECASE)),
    ("amount_then_total", re.compile(rf"{_AMOUNT}\s*TOTAL", re.IGNORECASE)),
    ("grand_total", re.compile(rf"GRAND TOTAL[^\d]*{_AMOUNT}", re.IGNORECASE)),
    ("total_amount", re.compile(rf"TOTAL\s*AMOUNT[^\d]*{_AMOUNT}", re.IGNORECASE)),
] + [
    (f"total_{q.lower()}", re.compile(rf"TOTAL\s*{q}[^\d]*{_AMOUNT}", re.IGNORECASE))
    for q in _TOTAL_QUALIFIERS
] + [
    (f"total_amount_{q.lower()}", re.compile(rf"TOTAL\s*AMOUNT\s*{q}[^\d]*{_AMOUNT}", re.IGNORECASE))
    for q in _TOTAL_AMOUNT_QUALIFIERS
]

# ============================================================================
# Line Items
# ============================================================================

# A row is the items header when it contains every one of these (case-insensitive)
ITEM_HEADER_KEYWORDS: Final[list[str]] = ["description", "unit", "qty", "rate", "total"]

# Category headers exactly as they appear in quotes; the last match in this order wins
BOQ_CATEGORIES: Final[list[str]] = [
    "Demolishing",
    "Ceiling Installation",
    "Brickwork",
    "Tiling installation",
    "Plumbing (supply and installation)",
    "Electrical Installation",
    "Paint",
]

DEFAULT_CATEGORY: Final[str] = "Uncategorized"
DEFAULT_UNIT: Final[str] = "item"

# Unit column tokens (lower-cased) and their display form
UNIT_ALIASES: Final[dict[str, str]] = {
    "m²": "m²",
    "m2": "m²",
    "item": "item",
    "ea": "ea",
    "no": "no",
}

# ============================================================================
# Materialization and File History
# ============================================================================

JOB_DURATION_DAYS: Final[int] = 30
INVOICE_DUE_DAYS: Final[int] = 30

FILE_STORE_DIR: Final[str] = os.getenv("FILE_STORE_DIR", "file_store")
FILE_HISTORY_LIMIT: Final[int] = int(os.getenv("FILE_HISTORY_LIMIT", "20"))

# ============================================================================
# API Configuration
# ============================================================================

API_HOST: Final[str] = os.getenv("API_HOST", "0.0.0.0")
API_PORT: Final[int] = int(os.getenv("API_PORT", "8000"))
MAX_UPLOAD_SIZE_MB: Final[int] = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))
LOAD_TIMEOUT_SECONDS: Final[float] = float(os.getenv("LOAD_TIMEOUT_SECONDS", "30"))

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO")

def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("boq_ingest")


logger = setup_logging()
