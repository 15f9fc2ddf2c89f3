"""
Logic for implementing embedding cache
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import diskcache
import platformdirs

from bert_embeddings.config import Settings
from bert_embeddings.schemas.embedding_schemas import EmbeddingResponse

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CACHE_APP_NAME = "bert-embeddings"


class ModelCache:
    """
    Disk cache of embedding responses, keyed by input text and model name.

    The cache directory is picked in this order:
    - Constructor parameter: cache_dir (relative paths resolve against cwd)
    - Environment variable: BERT_EMBEDDINGS_CACHE_DIR
    - Platform default, e.g. ~/.cache/bert-embeddings/ on Linux

    Entries never expire; diskcache evicts once size_limit is reached.
    """

    def __init__(
        self,
        cache_dir: Optional[str] = None,
        size_limit: int = 8 * 10**10,
        eviction_policy: str = "least-recently-used",
    ):
        self.cache_dir = self._resolve_cache_dir(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        self.cache = diskcache.Cache(
            str(self.cache_dir), size_limit=size_limit, eviction_policy=eviction_policy
        )
        self.size_limit = size_limit
        self.eviction_policy = eviction_policy
        logger.info("Initialized ModelCache at %s", self.cache_dir)

    @staticmethod
    def _resolve_cache_dir(cache_dir: Optional[str]) -> Path:
        if cache_dir is not None:
            path = Path(cache_dir)
            return path if path.is_absolute() else Path.cwd() / path
        # Read per call, the env may change after import
        env_cache_dir = Settings().BERT_EMBEDDINGS_CACHE_DIR
        if env_cache_dir:
            return Path(env_cache_dir)
        return Path(platformdirs.user_cache_dir(CACHE_APP_NAME, CACHE_APP_NAME))

    @staticmethod
    def _generate_key(user_input: str, model_name: Optional[str]) -> str:
        """
        Key format is model_name:hash, hash covering both input and model.
        """
        key_string = json.dumps(
            {"input": user_input, "model_name": model_name}, sort_keys=True
        )
        key_hash = hashlib.sha256(key_string.encode()).hexdigest()
        return f"{model_name}:{key_hash[:32]}"

    def get(self, user_input: str, model_name: Optional[str]) -> Optional[EmbeddingResponse]:
        """Cached response for this text and model, or None on a miss."""
        key = self._generate_key(user_input, model_name)
        with self.cache as cache:
            return cache.get(key)

    def set(
        self,
        user_input: str,
        model_name: Optional[str],
        response_result: EmbeddingResponse,
    ) -> None:
        """Store a response permanently (no expiration)."""
        key = self._generate_key(user_input, model_name)
        with self.cache as cache:
            cache.set(key, response_result)

    def clear(self) -> None:
        """Clear all cached entries"""
        self.cache.clear()
        logger.info("Cache cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        volume = self.cache.volume()
        return {
            "cache_dir": str(self.cache_dir),
            "size_bytes": volume,
            "entry_count": len(self.cache),
            "size_limit_bytes": self.size_limit,
            "eviction_policy": self.eviction_policy,
            "usage_percent": (volume / self.size_limit * 100) if self.size_limit > 0 else 0,
        }

    def close(self) -> None:
        """Close the cache"""
        self.cache.close()
