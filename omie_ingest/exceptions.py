"""
Custom exception hierarchy for omie-ingest.

Errors are scoped by how much of a run they invalidate:
- FormatError: one malformed numeral or date token. Parsers recover by
  skipping the field or row.
- ParseError: one whole document (missing date header, no recognizable
  schema, nothing extracted). Other dates in the range are unaffected.
- FetchError / NotFoundError: acquisition of one date failed. Reported in
  that date's FetchFailure, never raised out of the orchestrator.
- CancellationError: the caller asked the run to stop.
"""


class OmieIngestError(Exception):
    """Base exception for all omie-ingest errors."""


class FormatError(OmieIngestError, ValueError):
    """Raised when a numeral, hour or date token is syntactically invalid."""


class ParseError(OmieIngestError):
    """Raised when a document cannot yield any usable data.

    For example, the header line carries fewer than two dates, no line
    matches the technology vocabulary, or every data row was skipped.
    """


class UnknownFormatError(ParseError):
    """Raised when a document matches neither the labeled-row nor the
    tabular-row layout.

    Typically includes the first few lines of the document to aid debugging.
    """


class FetchError(OmieIngestError):
    """Raised when a document could not be retrieved.

    Covers transport failures (timeouts, refused connections) and any
    non-success HTTP status other than 404. Retried by the orchestrator.
    """


class NotFoundError(FetchError):
    """Raised when the remote explicitly reports that no document exists
    for a date (HTTP 404). Never retried.
    """


class CancellationError(OmieIngestError):
    """Raised when a fetch was abandoned because the run was cancelled."""


class ConfigValidationError(OmieIngestError):
    """Raised when a configuration file is empty or malformed."""
