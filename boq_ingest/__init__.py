"""
BoQ Ingest

Turns uploaded construction quotes and invoices (PDF) into structured
records: company, client, project, site, total and bill of quantities,
ready to pre-fill a job or a generated invoice.
"""

__version__ = "0.1.0"

from .schemas import BoQLineItem, ExtractedInvoiceRecord, JobDraft, GeneratedInvoice
from .errors import IngestError, LoadError, ParsingError
from .extractor import extract_record_from_bytes, extract_record_from_pdf, extract_record_from_text

__all__ = [
    "BoQLineItem",
    "ExtractedInvoiceRecord",
    "JobDraft",
    "GeneratedInvoice",
    "IngestError",
    "LoadError",
    "ParsingError",
    "extract_record_from_bytes",
    "extract_record_from_pdf",
    "extract_record_from_text",
]
