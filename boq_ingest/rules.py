"""
Quality rules for extracted records.

Extraction never fails on content, so a record with an empty client or a
zero total looks like any other record. These rules turn those silent
misses into flags a reviewer can act on:
- Extraction rules: a field or the item list came back empty
- Anomaly rules: extracted values that contradict each other

Each rule is a function that returns a flag code, or None if the record
passes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .schemas import ExtractedInvoiceRecord


class FlagCategory(str, Enum):
    """Categories for extraction flag codes."""
    EXTRACTION = "extraction"
    ANOMALY = "anomaly"


RuleCheckFn = Callable[[ExtractedInvoiceRecord], Optional[str]]


@dataclass
class ExtractionRule:
    """
    A single quality rule.

    Attributes:
        code: Machine-readable flag code (e.g., "extraction:no_line_items")
        description: Human-readable description of the rule
        category: Category of the rule
        check: Function that performs the check
    """
    code: str
    description: str
    category: FlagCategory
    check: RuleCheckFn


# ============================================================================
# Extraction Rules
# ============================================================================

def check_total_amount(record: ExtractedInvoiceRecord) -> Optional[str]:
    """A zero total means no tier found an amount, not that the quote is free."""
    if record.total_amount == 0:
        return f"{FlagCategory.EXTRACTION.value}:total_amount_missing"
    return None


def check_line_items(record: ExtractedInvoiceRecord) -> Optional[str]:
    if not record.items:
        return f"{FlagCategory.EXTRACTION.value}:no_line_items"
    return None


def _check_text_field(field: str) -> RuleCheckFn:
    def check(record: ExtractedInvoiceRecord) -> Optional[str]:
        if not getattr(record, field).strip():
            return f"{FlagCategory.EXTRACTION.value}:{field}_missing"
        return None
    return check


check_company_name = _check_text_field("company_name")
check_project_title = _check_text_field("project_title")
check_client_name = _check_text_field("client_name")
check_location = _check_text_field("location")


# ============================================================================
# Anomaly Rules
# ============================================================================

def check_items_exceed_total(record: ExtractedInvoiceRecord) -> Optional[str]:
    """
    Item amounts should not add up to more than the document total.

    Skipped when either side is missing.
    """
    if record.total_amount <= 0 or not record.items:
        return None

    items_sum = sum(item.amount for item in record.items)
    if items_sum - record.total_amount > 0.01:
        return f"{FlagCategory.ANOMALY.value}:items_exceed_total"
    return None


# ============================================================================
# Rule Registry
# ============================================================================

EXTRACTION_RULES: list[ExtractionRule] = [
    ExtractionRule(
        code="extraction:total_amount_missing",
        description="A total amount was found in the document",
        category=FlagCategory.EXTRACTION,
        check=check_total_amount,
    ),
    ExtractionRule(
        code="extraction:no_line_items",
        description="At least one bill-of-quantities row was parsed",
        category=FlagCategory.EXTRACTION,
        check=check_line_items,
    ),
    ExtractionRule(
        code="extraction:company_name_missing",
        description="The issuing company was identified",
        category=FlagCategory.EXTRACTION,
        check=check_company_name,
    ),
    ExtractionRule(
        code="extraction:project_title_missing",
        description="A project title was found",
        category=FlagCategory.EXTRACTION,
        check=check_project_title,
    ),
    ExtractionRule(
        code="extraction:client_name_missing",
        description="A client name was found",
        category=FlagCategory.EXTRACTION,
        check=check_client_name,
    ),
    ExtractionRule(
        code="extraction:location_missing",
        description="A site location was found",
        category=FlagCategory.EXTRACTION,
        check=check_location,
    ),
    ExtractionRule(
        code="anomaly:items_exceed_total",
        description="Item amounts do not exceed the document total",
        category=FlagCategory.ANOMALY,
        check=check_items_exceed_total,
    ),
]


def check_record(
    record: ExtractedInvoiceRecord,
    rules: Optional[list[ExtractionRule]] = None,
) -> list[str]:
    """Run every rule against a record and return the flags raised, in rule order."""
    if rules is None:
        rules = EXTRACTION_RULES

    flags = []
    for rule in rules:
        flag = rule.check(record)
        if flag:
            flags.append(flag)
    return flags


def get_rule_descriptions() -> dict[str, str]:
    """Get a mapping of flag codes to their descriptions."""
    return {rule.code: rule.description for rule in EXTRACTION_RULES}
