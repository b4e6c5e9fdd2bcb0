"""
Command-line interface for the BoQ ingestion service.

Provides three commands:
- extract: Extract records from a directory of PDFs to JSON
- job-draft: Build a job draft from a single PDF and store its first page
- version: Show version information
"""

import json
from pathlib import Path
from typing import Optional

import typer

from .config import FILE_STORE_DIR, logger
from .errors import IngestError
from .extractor import extract_record_from_pdf, extract_records_from_dir, write_extracted_records
from .file_store import FileHistoryStore, project_job_key
from .materialize import build_job_draft, validate_job_draft
from .rules import check_record


# Create Typer app
app = typer.Typer(
    name="boq-ingest",
    help="Quote and invoice ingestion for construction jobs",
    add_completion=False,
)


@app.command()
def extract(
    pdf_dir: Path = typer.Option(
        ...,
        "--pdf-dir",
        "-p",
        help="Directory containing quote/invoice PDF files",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    output: Path = typer.Option(
        "extracted_records.json",
        "--output",
        "-o",
        help="Output JSON file path",
    ),
) -> None:
    """
    Extract records from PDF files to JSON.

    Reads all PDF files from the specified directory, extracts company,
    client, project, total and bill of quantities, and writes the results
    to a JSON file keyed by file name.
    """
    typer.echo(f"Extracting records from: {pdf_dir}")

    try:
        records = extract_records_from_dir(pdf_dir)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not records:
        typer.echo("No records were extracted.", err=True)
        raise typer.Exit(code=1)

    write_extracted_records(records, output)

    typer.echo(f"\n[OK] Extracted {len(records)} record(s) to: {output}")
    for name, record in list(records.items())[:10]:
        flags = check_record(record)
        typer.echo(
            f"  - {name} | {record.company_name or '?'} | {record.total_amount:.2f} | "
            f"{len(record.items)} item(s)" + (f" | {', '.join(flags)}" if flags else "")
        )
    if len(records) > 10:
        typer.echo(f"  ... and {len(records) - 10} more")


@app.command("job-draft")
def job_draft(
    pdf: Path = typer.Option(
        ...,
        "--pdf",
        "-p",
        help="Quote or invoice PDF",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    job_id: Optional[str] = typer.Option(
        None,
        "--job-id",
        "-j",
        help="Job whose file history receives page 1 (default: key from the project title)",
    ),
    store_dir: Path = typer.Option(
        FILE_STORE_DIR,
        "--store-dir",
        help="File history directory",
    ),
) -> None:
    """
    Build a job draft from a single document and print it as JSON.
    """
    try:
        record = extract_record_from_pdf(pdf)
        draft = build_job_draft(record)

        history_key = job_id or (project_job_key(record.project_title) if record.project_title else None)
        if history_key:
            file_id = FileHistoryStore(store_dir).save_first_page(history_key, pdf.read_bytes(), pdf.name)
            typer.echo(f"Stored first page as {file_id}", err=True)
    except IngestError as e:
        typer.echo(f"Error: {e}", err=True)
        logger.exception("Job draft failed")
        raise typer.Exit(code=1)

    typer.echo(json.dumps(draft.model_dump(mode="json"), indent=2, ensure_ascii=False))

    for flag in check_record(record):
        typer.echo(f"Warning: {flag}", err=True)
    missing = validate_job_draft(draft)
    if missing:
        typer.echo(f"Missing required job fields: {', '.join(missing)}", err=True)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    typer.echo(f"BoQ Ingest v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
