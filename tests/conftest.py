"""
File For Fixtures
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock
import pytest
from bert_embeddings.clients.embedding_client import EmbeddingClient
from bert_embeddings.clients.model_cache import ModelCache


def _fake_vector(text):
    """Deterministic 3-dim vector derived from the text."""
    return [float(len(text)), float(text.count(" ")), 0.5]


async def _fake_create(model, input, encoding_format):  # pylint: disable=redefined-builtin
    return SimpleNamespace(
        model=model,
        usage={"total_tokens": len(input)},
        data=[
            SimpleNamespace(index=i, embedding=_fake_vector(text))
            for i, text in enumerate(input)
        ],
    )


@pytest.fixture
def mock_embedding_client():
    """
    Provides an EmbeddingClient with a mocked AsyncOpenAI client.
    """
    client = EmbeddingClient(batch_size=2, max_concurrency=5, api_key="fake-key")

    # Patch the embeddings.create method
    client.client.embeddings.create = AsyncMock(side_effect=_fake_create)

    return client


@pytest.fixture
def model_cache(tmp_path):
    cache = ModelCache(cache_dir=str(tmp_path / "cache"))
    yield cache
    cache.close()


@pytest.fixture
def fake_vector():
    """The vector the mocked endpoint returns for a given text."""
    return _fake_vector


@pytest.fixture
def fake_embeddings_create():
    """Mocked embeddings.create returning one fake vector per input text."""
    return AsyncMock(side_effect=_fake_create)
