from .config import settings, Settings
from .errors import EmbeddingError, EmbeddingFailedError, ResourceLoadError
from .schemas.embedding_schemas import EmbeddingRecord, EmbeddingResponse
from .clients.model_cache import ModelCache
from .clients.embedding_client import EmbeddingClient

__version__ = "0.1.0"
__all__ = [
    "settings",
    "Settings",
    "EmbeddingRecord",
    "EmbeddingResponse",
    "EmbeddingClient",
    "ModelCache",
    "EmbeddingError",
    "EmbeddingFailedError",
    "ResourceLoadError",
]
