"""
Exceptions raised while producing embedding records.
"""


class EmbeddingError(Exception):
    """Base exception for the embedding client."""


class EmbeddingFailedError(EmbeddingError):
    """Raised when some text could not be embedded after all retries."""


class ResourceLoadError(EmbeddingError):
    """Raised when the content behind a resource reference cannot be read."""
