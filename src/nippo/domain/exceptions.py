"""Custom exceptions for nippo.

Fatal errors (configuration, fetch, persistence) abort a run.  Scoped
errors (front-matter, update) are recorded on a single document's outcome
and never abort the run.
"""


class NippoError(Exception):
    """Base exception for all nippo errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(NippoError):
    """Raised when required configuration is missing or invalid."""

    pass


class FetchError(NippoError):
    """Raised when the document store cannot list candidate documents."""

    pass


class FrontMatterError(NippoError):
    """Raised when a document's metadata block cannot be decoded."""

    pass


class MalformedYAMLError(FrontMatterError):
    """The block is not a YAML mapping with string keys."""

    pass


class InvalidDateFormatError(FrontMatterError):
    """``created`` or ``updated`` is not an RFC 3339 timestamp with offset."""

    pass


class UpdateError(NippoError):
    """Raised when the document store rejects a content update."""

    pass


class PersistenceError(NippoError):
    """Raised when the sync checkpoint cannot be read or saved."""

    pass
