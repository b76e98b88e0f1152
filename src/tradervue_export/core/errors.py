"""Custom exception hierarchy for the exporter."""


class ExportError(Exception):
    """Base exception for all exporter errors."""


# --- Configuration ---
class ConfigError(ExportError):
    """Invalid or missing configuration."""


# --- Remote API ---
class TransportError(ExportError):
    """Remote API communication error."""


class AuthError(TransportError):
    """Credentials rejected by the remote API. Never retried."""


class ValidationError(TransportError):
    """Malformed request rejected by the remote API (HTTP 400). Never retried."""

    def __init__(self, body: str):
        self.body = body
        super().__init__(f"bad request (HTTP 400): {body}")


class UnexpectedStatusError(TransportError):
    """Non-success status that is neither auth, validation nor server fault."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"unexpected status {status_code}: {body}")


class TransientError(TransportError):
    """Server-side (5xx) or network fault; eligible for retry."""


class RetriesExhaustedError(TransientError):
    """All retry attempts failed; carries the last observed cause."""

    def __init__(self, attempts: int, last_error: Exception | None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"request failed after {attempts} attempts: {last_error}")


# --- Data ---
class ParseError(ExportError):
    """Unparseable response body or record timestamp."""


class PaginationLimitError(ExportError):
    """Listing did not terminate within the page ceiling."""


class NoRecordsError(ExportError):
    """The remote account holds no records."""


# --- Persistence ---
class ArchiveWriteError(ExportError):
    """A day archive or the progress cursor could not be written."""
