"""Exception hierarchy for the Notion import pipeline."""


class NotionImportError(Exception):
    """Base exception for import-related errors."""
    pass


class MissingIdentityError(NotionImportError):
    """A document-bearing entry has no extractable Notion id."""
    pass


class UnresolvedReferenceError(NotionImportError):
    """An entry references a document or attachment absent from the mappings."""
    pass


class ConversionError(NotionImportError):
    """The markup conversion transform failed on a document body."""
    pass


class WriteFailureError(NotionImportError):
    """The storage backend rejected a write."""
    pass


class ImportConfigurationError(NotionImportError, ValueError):
    """Pre-flight configuration problem that halts the run before any archive is read."""
    pass


__all__ = [
    'NotionImportError',
    'MissingIdentityError',
    'UnresolvedReferenceError',
    'ConversionError',
    'WriteFailureError',
    'ImportConfigurationError'
]
