"""
Pydantic models for extracted quote data and the records built from it.

This module defines the core data structures used throughout the service:
- PositionedFragment and TextLine for the reconstructed page layout
- BoQLineItem and ExtractedInvoiceRecord for extraction results
- JobDraft and GeneratedInvoice for the records created from an extraction
- Response models for the REST API
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .config import DEFAULT_CATEGORY, DEFAULT_UNIT


# ============================================================================
# Layout
# ============================================================================

class PositionedFragment(BaseModel):
    """One run of text at a page coordinate (PDF space, origin bottom-left)."""
    text: str
    x: float
    y: float

    model_config = {"frozen": True}


class TextLine(BaseModel):
    """Fragments that share a visual line, ordered left to right."""
    y: float
    fragments: list[PositionedFragment] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(fragment.text for fragment in self.fragments)


# ============================================================================
# Extraction Results
# ============================================================================

class BoQLineItem(BaseModel):
    """
    A single bill-of-quantities row.

    Attributes:
        id: 1-based position in extraction order
        description: Work or material description
        unit: Unit of measure (m², item, ea, no)
        quantity: Number of units
        rate: Price per unit
        amount: Line amount as stated on the document (never recomputed)
        category: Category header the row appeared under
    """
    id: int = Field(..., ge=1, description="Sequential item number")
    description: str = Field(..., min_length=1, description="Item description")
    unit: str = Field(DEFAULT_UNIT, description="Unit of measure")
    quantity: float = Field(..., ge=0, description="Number of units")
    rate: float = Field(..., ge=0, description="Price per unit")
    amount: float = Field(..., ge=0, description="Stated line amount")
    category: str = Field(DEFAULT_CATEGORY, description="Category header")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "description": "Floor tiles",
                    "unit": "m²",
                    "quantity": 5,
                    "rate": 240.00,
                    "amount": 1200.00,
                    "category": "Tiling installation",
                }
            ]
        },
    }


class ExtractedInvoiceRecord(BaseModel):
    """
    Structured data recovered from one uploaded quote or invoice.

    Empty strings, a zero total and an empty item list mean the
    corresponding extraction found nothing; they are not statements about
    the document.
    """
    company_name: str = Field("", description="Issuing company")
    project_title: str = Field("", description="Project or job title")
    client_name: str = Field("", description="Client the document is addressed to")
    location: str = Field("", description="Site address")
    total_amount: float = Field(0.0, description="Final total; 0 when not found")
    items: list[BoQLineItem] = Field(default_factory=list, description="Bill of quantities")
    raw_text: str = Field("", description="Reconstructed document text")

    model_config = {"frozen": True}


# ============================================================================
# Materialized Records
# ============================================================================

class JobInvoice(BaseModel):
    """Invoice summary attached to a job created from a document."""
    items: list[BoQLineItem] = Field(default_factory=list)
    total: float = 0.0
    company: str = ""


class JobDraft(BaseModel):
    """A job pre-filled from an extracted record, ready for review."""
    title: str = ""
    client: str = ""
    location: str = ""
    budget: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: str = ""
    status: Literal["active", "completed", "on-hold", "cancelled"] = "active"
    invoice: JobInvoice = Field(default_factory=JobInvoice)


class GeneratedInvoice(BaseModel):
    """An invoice generated for a job from an extracted record."""
    job_id: str
    number: str
    issue_date: date
    due_date: date
    items: list[BoQLineItem] = Field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    notes: str = ""
    status: Literal["draft", "sent", "paid"] = "draft"


class FileHistoryEntry(BaseModel):
    """Metadata for one file stored against a job."""
    id: str
    name: str
    type: str = "application/pdf"
    uploaded_at: datetime


# ============================================================================
# API Request/Response Models
# ============================================================================

class ExtractResponse(BaseModel):
    """Response for the /extract endpoint."""
    record: ExtractedInvoiceRecord
    flags: list[str] = Field(
        default_factory=list,
        description="Extraction quality flags (e.g., 'extraction:total_amount_missing')",
    )


class JobDraftResponse(BaseModel):
    """Response for the /jobs/draft endpoint."""
    job: JobDraft
    missing_fields: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)
    file_id: Optional[str] = Field(None, description="Stored first page of the source document")
