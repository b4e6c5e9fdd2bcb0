"""
FastAPI application for the BoQ ingestion service.

Provides REST API endpoints for:
- Health check
- PDF extraction
- Job drafts from an uploaded PDF, with first-page file history
"""

from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .config import API_HOST, API_PORT, MAX_UPLOAD_SIZE_MB, logger
from .errors import IngestError, ParsingError
from .extractor import extract_record_async
from .file_store import FileHistoryStore, project_job_key
from .materialize import build_job_draft, validate_job_draft
from .rules import check_record
from .schemas import ExtractResponse, FileHistoryEntry, JobDraftResponse


# ============================================================================
# FastAPI App Configuration
# ============================================================================

app = FastAPI(
    title="BoQ Ingest API",
    description="""
    Quote and invoice ingestion for construction jobs.

    Upload a PDF quote or invoice to recover its company, client, project,
    site, total and bill of quantities, or to pre-fill a job from it.
    """,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_file_store() -> FileHistoryStore:
    return FileHistoryStore()


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


# ============================================================================
# Helpers
# ============================================================================

async def read_pdf_upload(file: UploadFile) -> bytes:
    """Read an upload, rejecting non-PDF and oversized files."""
    filename = file.filename or ""
    if not filename.lower().endswith(".pdf") and file.content_type != "application/pdf":
        raise HTTPException(status_code=400, detail=f"{filename}: Not a PDF file")

    content = await file.read()
    if len(content) > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"{filename}: File too large (max {MAX_UPLOAD_SIZE_MB}MB)",
        )
    return content


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Returns the service status and version information."""
    from . import __version__
    return HealthResponse(status="ok", version=__version__)


@app.post(
    "/extract",
    response_model=ExtractResponse,
    tags=["Extraction"],
    summary="Extract a record from a PDF",
)
async def extract(file: UploadFile = File(..., description="Quote or invoice PDF")) -> ExtractResponse:
    """
    Extract structured data from an uploaded quote or invoice.

    Fields that could not be found are returned empty and reported in
    ``flags``; only an unreadable PDF is an error (422).
    """
    content = await read_pdf_upload(file)

    try:
        record = await extract_record_async(content, file.filename or "uploaded.pdf")
    except ParsingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ExtractResponse(record=record, flags=check_record(record))


@app.post(
    "/jobs/draft",
    response_model=JobDraftResponse,
    tags=["Jobs"],
    summary="Pre-fill a job from a PDF",
)
async def job_draft(
    file: UploadFile = File(..., description="Quote or invoice PDF"),
    job_id: Optional[str] = Form(None, description="Job whose file history receives page 1"),
    store: FileHistoryStore = Depends(get_file_store),
) -> JobDraftResponse:
    """
    Build a job draft from an uploaded document.

    The first page of the document is stored in the file history of
    ``job_id``, or, when no job exists yet, under a key derived from the
    extracted project title. Its id is returned as ``file_id``.
    """
    content = await read_pdf_upload(file)
    filename = file.filename or "uploaded.pdf"

    try:
        record = await extract_record_async(content, filename)
    except ParsingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    draft = build_job_draft(record)

    file_id = None
    history_key = job_id or (project_job_key(record.project_title) if record.project_title else None)
    if history_key:
        try:
            file_id = store.save_first_page(history_key, content, filename)
        except IngestError as e:
            logger.error(f"Could not store first page of {filename}: {e}")

    return JobDraftResponse(
        job=draft,
        missing_fields=validate_job_draft(draft),
        flags=check_record(record),
        file_id=file_id,
    )


@app.get("/jobs/{job_id}/files", response_model=list[FileHistoryEntry], tags=["Jobs"])
async def list_job_files(job_id: str, store: FileHistoryStore = Depends(get_file_store)):
    """List the stored files for a job, newest first."""
    return store.history(job_id)


@app.get("/jobs/{job_id}/files/{file_id}", tags=["Jobs"])
async def get_job_file(job_id: str, file_id: str, store: FileHistoryStore = Depends(get_file_store)):
    """Download a stored file."""
    blob = store.get(job_id, file_id)
    if blob is None:
        raise HTTPException(status_code=404, detail="File not found")
    return Response(content=blob, media_type="application/pdf")


@app.get("/rules", tags=["System"])
async def list_rules():
    """List the quality flags the service can raise."""
    from .rules import get_rule_descriptions
    return get_rule_descriptions()


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# ============================================================================
# Main Entry Point
# ============================================================================

def run_server():
    """Run the API server using uvicorn."""
    import uvicorn
    logger.info(f"BoQ Ingest API starting on {API_HOST}:{API_PORT}")
    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    run_server()
