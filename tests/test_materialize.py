"""
Tests for building jobs and invoices from extracted records.
"""

from datetime import date

import pytest

from boq_ingest.materialize import (
    build_generated_invoice,
    build_job_draft,
    calculate_invoice_total,
    format_invoice_number,
    validate_job_draft,
)
from boq_ingest.schemas import BoQLineItem, ExtractedInvoiceRecord


@pytest.fixture
def record() -> ExtractedInvoiceRecord:
    return ExtractedInvoiceRecord(
        company_name="PTP BUILDING SERVICES",
        project_title="Bathroom Renovation",
        client_name="Mrs N. Dlamini",
        location="4 Oak Street, Paarl",
        total_amount=1380.00,
        items=[
            BoQLineItem(id=1, description="Floor tiles", unit="m²", quantity=5, rate=240, amount=1200,
                        category="Tiling installation"),
        ],
    )


class TestBuildJobDraft:
    """Tests for job drafts."""

    def test_field_mapping(self, record):
        draft = build_job_draft(record, today=date(2025, 3, 1))

        assert draft.title == "Bathroom Renovation"
        assert draft.client == "Mrs N. Dlamini"
        assert draft.location == "4 Oak Street, Paarl"
        assert draft.budget == 1380.00
        assert draft.status == "active"
        assert draft.invoice.company == "PTP BUILDING SERVICES"
        assert draft.invoice.total == 1380.00
        assert draft.invoice.items == record.items

    def test_dates(self, record):
        draft = build_job_draft(record, today=date(2025, 3, 1))
        assert draft.start_date == date(2025, 3, 1)
        assert draft.end_date == date(2025, 3, 31)

    def test_description_lists_items(self, record):
        draft = build_job_draft(record, today=date(2025, 3, 1))
        assert draft.description == (
            "Project based on invoice from PTP BUILDING SERVICES\nItems:\n- Floor tiles"
        )

    def test_validate_complete_draft(self, record):
        assert validate_job_draft(build_job_draft(record)) == []

    def test_validate_reports_missing_fields(self):
        draft = build_job_draft(ExtractedInvoiceRecord())
        assert validate_job_draft(draft) == ["title", "client"]


class TestInvoiceHelpers:
    """Tests for invoice number and total helpers."""

    def test_calculate_invoice_total(self, record):
        items = record.items + [
            BoQLineItem(id=2, description="Grout", quantity=2, rate=50, amount=99),
        ]
        assert calculate_invoice_total(items) == 1300.0

    def test_format_passthrough(self):
        assert format_invoice_number("INV-2024-0007") == "INV-2024-0007"

    def test_format_pads_digits(self):
        assert format_invoice_number("#57", year=2025) == "INV-2025-0057"

    def test_format_empty(self):
        assert format_invoice_number("") == ""


class TestBuildGeneratedInvoice:
    """Tests for generated invoices."""

    def test_tax_from_total(self, record):
        invoice = build_generated_invoice(record, "job-1", "12", issue_date=date(2025, 1, 10))

        assert invoice.job_id == "job-1"
        assert invoice.number == "INV-2025-0012"
        assert invoice.subtotal == 1200.00
        assert invoice.tax == 180.00
        assert invoice.total == 1380.00
        assert invoice.due_date == date(2025, 2, 9)
        assert invoice.status == "draft"

    def test_missing_total_uses_subtotal(self, record):
        record = record.model_copy(update={"total_amount": 0.0})
        invoice = build_generated_invoice(record, "job-1", "INV-1", issue_date=date(2025, 1, 10))
        assert invoice.total == 1200.00
        assert invoice.tax == 0.0
