"""
Exceptions raised by the ingestion pipeline.

Only whole-document failures are exceptions. A field that cannot be found
or an item row that does not parse is a normal outcome and is reported
through the extracted record instead.
"""


class IngestError(Exception):
    """Base class for ingestion failures."""


class LoadError(IngestError):
    """The input bytes could not be opened as a PDF document."""


class ParsingError(IngestError):
    """An uploaded document could not be turned into an extracted record."""
