"""
Per-job file history.

Stores the first page of each uploaded document against its job so the
source can be reviewed later. Blobs live under ``<root>/<job_id>/`` with
an ``index.json`` listing entries newest first.
"""

import io
import json
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pypdf import PdfReader, PdfWriter

from .config import FILE_HISTORY_LIMIT, FILE_STORE_DIR, logger
from .errors import LoadError
from .schemas import FileHistoryEntry

INDEX_FILE = "index.json"


def extract_first_page_as_pdf(pdf_bytes: bytes) -> bytes:
    """
    Return a new single-page PDF holding the first page of ``pdf_bytes``.

    Raises:
        LoadError: If the input is not a readable PDF or has no pages
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        first_page = reader.pages[0]
    except Exception as e:
        raise LoadError(f"Could not read first page: {e}") from e

    writer = PdfWriter()
    writer.add_page(first_page)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page1_file_name(file_name: str) -> str:
    """``quote.pdf`` -> ``quote_page1.pdf``."""
    return re.sub(r"\.pdf$", "", file_name, flags=re.IGNORECASE) + "_page1.pdf"


def project_job_key(project_title: str) -> str:
    """Job key for a document with no job yet: ``Bathroom Renovation`` -> ``bathroom_renovation``."""
    return re.sub(r"\s+", "_", project_title.strip()).lower()


class FileHistoryStore:
    """Directory-backed blob store keyed by job id and file id."""

    def __init__(self, root: Path = Path(FILE_STORE_DIR), limit: int = FILE_HISTORY_LIMIT):
        self.root = Path(root)
        self.limit = limit

    def _job_dir(self, job_id: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_\-]", "_", job_id)
        return self.root / safe_id

    def history(self, job_id: str) -> list[FileHistoryEntry]:
        """Stored entries for a job, newest first."""
        index_path = self._job_dir(job_id) / INDEX_FILE
        if not index_path.exists():
            return []
        with open(index_path, "r", encoding="utf-8") as f:
            return [FileHistoryEntry.model_validate(entry) for entry in json.load(f)]

    def save(self, job_id: str, blob: bytes, file_name: str, content_type: str = "application/pdf") -> str:
        """
        Store a blob for a job and return its file id.

        Entries beyond the history limit are dropped, oldest first.
        """
        job_dir = self._job_dir(job_id)
        job_dir.mkdir(parents=True, exist_ok=True)

        file_id = uuid.uuid4().hex
        (job_dir / file_id).write_bytes(blob)

        entries = [
            FileHistoryEntry(
                id=file_id,
                name=file_name,
                type=content_type,
                uploaded_at=datetime.now(timezone.utc),
            )
        ] + self.history(job_id)

        for evicted in entries[self.limit:]:
            (job_dir / evicted.id).unlink(missing_ok=True)
        entries = entries[:self.limit]

        with open(job_dir / INDEX_FILE, "w", encoding="utf-8") as f:
            json.dump([entry.model_dump(mode="json") for entry in entries], f, indent=2)

        logger.info(f"Stored {file_name} for job {job_id} as {file_id}")
        return file_id

    def get(self, job_id: str, file_id: str) -> Optional[bytes]:
        """Stored blob, or None if the job has no such file."""
        if not any(entry.id == file_id for entry in self.history(job_id)):
            return None
        return (self._job_dir(job_id) / file_id).read_bytes()

    def save_first_page(self, job_id: str, pdf_bytes: bytes, file_name: str) -> str:
        """Store the first page of an uploaded document against a job."""
        return self.save(job_id, extract_first_page_as_pdf(pdf_bytes), page1_file_name(file_name))
