"""
Extraction pipeline for converting quote and invoice PDFs to records.

This module provides functionality to:
- Load a PDF and rebuild its text layout page by page
- Run every field extractor and the line item extractor over that text
- Output immutable ExtractedInvoiceRecord objects
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Callable, Optional

from .config import LOAD_TIMEOUT_SECONDS, logger
from .errors import LoadError, ParsingError
from .fields import (
    extract_client_name,
    extract_company_name,
    extract_location,
    extract_project_title,
    extract_total_amount,
)
from .layout import reconstruct_page
from .line_items import extract_line_items
from .loader import LoadedDocument, open_document
from .schemas import ExtractedInvoiceRecord

DocumentLoader = Callable[[bytes], LoadedDocument]


# ============================================================================
# Text Reconstruction
# ============================================================================

def reconstruct_from_document(document: LoadedDocument) -> str:
    """
    Rebuild the text of every page, strictly in page order.

    Args:
        document: An opened document

    Returns:
        Reconstructed text of all pages
    """
    text_parts = []
    for number in range(1, document.page_count + 1):
        fragments = document.get_page(number).get_fragments()
        text_parts.append(reconstruct_page(fragments))
    return "".join(text_parts)


# ============================================================================
# Main Extraction Functions
# ============================================================================

def extract_record_from_text(text: str, log: Optional[logging.Logger] = None) -> ExtractedInvoiceRecord:
    """
    Run all extractors over one reconstructed document.

    Never raises for content reasons: fields that cannot be found are left
    empty and a missing total is ``0.0``.
    """
    return ExtractedInvoiceRecord(
        company_name=extract_company_name(text),
        project_title=extract_project_title(text),
        client_name=extract_client_name(text),
        location=extract_location(text),
        total_amount=extract_total_amount(text, log),
        items=extract_line_items(text, log),
        raw_text=text,
    )


def extract_record_from_bytes(
    pdf_bytes: bytes,
    filename: str = "uploaded.pdf",
    loader: DocumentLoader = open_document,
    log: Optional[logging.Logger] = None,
) -> ExtractedInvoiceRecord:
    """
    Extract a record from raw PDF bytes.

    Args:
        pdf_bytes: Raw PDF file content
        filename: Original filename for logging
        loader: Document loader used to open the bytes
        log: Logger for extractor traces

    Returns:
        Extracted record

    Raises:
        ParsingError: If the bytes cannot be opened or read as a PDF
    """
    logger.info(f"Extracting record from: {filename}")

    try:
        with loader(pdf_bytes) as document:
            text = reconstruct_from_document(document)
    except LoadError as e:
        logger.error(f"Failed to load {filename}: {e}")
        raise ParsingError(f"Could not parse {filename}: {e}") from e

    record = extract_record_from_text(text, log)

    logger.info(
        f"Extracted {len(record.items)} item(s), total {record.total_amount:.2f} "
        f"from: {filename}"
    )
    return record


async def extract_record_async(
    pdf_bytes: bytes,
    filename: str = "uploaded.pdf",
    timeout: float = LOAD_TIMEOUT_SECONDS,
    loader: DocumentLoader = open_document,
) -> ExtractedInvoiceRecord:
    """
    Extract a record in a worker thread, giving up after ``timeout`` seconds.

    A timed-out worker thread is not interrupted; its result is discarded.

    Raises:
        ParsingError: If the document cannot be parsed or the timeout expires
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(extract_record_from_bytes, pdf_bytes, filename, loader),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Timed out after {timeout}s extracting: {filename}")
        raise ParsingError(f"Timed out reading {filename}") from e


def extract_record_from_pdf(pdf_path: Path) -> ExtractedInvoiceRecord:
    """
    Extract a record from a PDF file on disk.

    Raises:
        ParsingError: If the file is not a readable PDF
    """
    return extract_record_from_bytes(pdf_path.read_bytes(), pdf_path.name)


def extract_records_from_dir(pdf_dir: Path) -> dict[str, ExtractedInvoiceRecord]:
    """
    Extract records from all PDF files in a directory.

    Args:
        pdf_dir: Path to directory containing PDF files

    Returns:
        Mapping of file name to extracted record; unreadable files are
        logged and left out
    """
    if not pdf_dir.exists():
        raise FileNotFoundError(f"Directory not found: {pdf_dir}")

    pdf_files = sorted(list(pdf_dir.glob("*.pdf")) + list(pdf_dir.glob("*.PDF")))

    if not pdf_files:
        logger.warning(f"No PDF files found in: {pdf_dir}")
        return {}

    logger.info(f"Found {len(pdf_files)} PDF files to process")

    records = {}
    for pdf_path in pdf_files:
        try:
            records[pdf_path.name] = extract_record_from_pdf(pdf_path)
        except ParsingError as e:
            logger.error(f"Failed to extract record from {pdf_path}: {e}")

    logger.info(f"Successfully extracted {len(records)} records")
    return records


def write_extracted_records(records: dict[str, ExtractedInvoiceRecord], output_path: Path) -> None:
    """
    Write extracted records to a JSON file keyed by source file name.
    """
    output_data = {name: record.model_dump(mode="json") for name, record in records.items()}

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(output_data, f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote {len(records)} records to: {output_path}")
