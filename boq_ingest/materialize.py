"""
Turning extracted records into jobs and invoices.

A record only pre-fills a job or invoice; nothing here persists anything.
"""

import re
from datetime import date, timedelta
from typing import Optional

from .config import INVOICE_DUE_DAYS, JOB_DURATION_DAYS
from .schemas import BoQLineItem, ExtractedInvoiceRecord, GeneratedInvoice, JobDraft, JobInvoice

# Fields a job cannot be created without
REQUIRED_JOB_FIELDS = ["title", "client", "start_date"]


def build_job_draft(record: ExtractedInvoiceRecord, today: Optional[date] = None) -> JobDraft:
    """
    Pre-fill a job from an extracted record.

    The job runs for ``JOB_DURATION_DAYS`` from ``today`` and its
    description lists the company and every item description.
    """
    today = today or date.today()

    description_lines = [f"Project based on invoice from {record.company_name}", "Items:"]
    description_lines.extend(f"- {item.description}" for item in record.items)

    return JobDraft(
        title=record.project_title,
        client=record.client_name,
        location=record.location,
        budget=record.total_amount,
        start_date=today,
        end_date=today + timedelta(days=JOB_DURATION_DAYS),
        description="\n".join(description_lines),
        invoice=JobInvoice(
            items=list(record.items),
            total=record.total_amount,
            company=record.company_name,
        ),
    )


def validate_job_draft(draft: JobDraft) -> list[str]:
    """Return the names of required fields that are still empty."""
    missing = []
    for field in REQUIRED_JOB_FIELDS:
        value = getattr(draft, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def calculate_invoice_total(items: list[BoQLineItem]) -> float:
    """Sum of quantity × rate over the items."""
    return sum(item.quantity * item.rate for item in items)


def format_invoice_number(number: str, year: Optional[int] = None) -> str:
    """
    Normalise an invoice number to ``INV-YYYY-NNNN``.

    Numbers already starting with ``INV-`` are returned unchanged; other
    values keep only their digits, zero-padded to four.
    """
    if not number:
        return ""
    if number.startswith("INV-"):
        return number

    digits = re.sub(r"[^0-9]", "", number)
    year = year or date.today().year
    return f"INV-{year}-{digits.zfill(4)}"


def build_generated_invoice(
    record: ExtractedInvoiceRecord,
    job_id: str,
    number: str,
    issue_date: Optional[date] = None,
) -> GeneratedInvoice:
    """
    Generate a draft invoice for a job from an extracted record.

    The subtotal is the sum of the stated item amounts. When the document
    total is larger, the difference is taken as tax; when no total was
    extracted the subtotal stands in for it.
    """
    issue_date = issue_date or date.today()
    subtotal = round(sum(item.amount for item in record.items), 2)
    total = record.total_amount or subtotal
    tax = round(total - subtotal, 2) if total > subtotal else 0.0

    return GeneratedInvoice(
        job_id=job_id,
        number=format_invoice_number(number, issue_date.year),
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=INVOICE_DUE_DAYS),
        items=list(record.items),
        subtotal=subtotal,
        tax=tax,
        total=total,
        notes=f"Generated from document issued by {record.company_name}" if record.company_name else "",
    )
