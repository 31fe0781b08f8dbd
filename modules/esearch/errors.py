"""
ESearch error taxonomy.

Write path favours availability (skip and log), except deletes.
Read path favours failing fast.
"""


class ESearchError(Exception):
    """Base class for all ESearch errors."""
    pass


class MetadataError(ESearchError, ValueError):
    """Raised when a model type's search metadata is unusable."""
    pass


class IndexClientError(ESearchError):
    """Raised by an index client when a call to the search engine fails."""
    pass


class StartupError(ESearchError):
    """Raised when the index could not be (re)created. The adapter must not start."""
    pass


class SerializationError(ESearchError):
    """Raised when a field value cannot be read off an instance."""
    pass


class UnindexError(ESearchError):
    """Raised when a delete-by-id call fails. Always propagated."""

    def __init__(self, type_name: str, doc_id: str, message: str = ""):
        self.type_name = type_name
        self.doc_id = doc_id
        super().__init__(message or f"Failed to unindex {type_name}/{doc_id}")


class MaterializationError(ESearchError):
    """Raised when a result set cannot be turned back into model instances."""
    pass


class AdapterNotReadyError(ESearchError):
    """Raised when traffic reaches the adapter before the index was created."""
    pass
