"""
Tests for the disk-backed embedding cache.
"""

from pathlib import Path

from bert_embeddings.clients.model_cache import ModelCache
from bert_embeddings.schemas.embedding_schemas import EmbeddingResponse


def test_set_then_get(model_cache):
    response = EmbeddingResponse(text="hello", embedding=[0.1, 0.2])
    model_cache.set(user_input="hello", model_name="m", response_result=response)
    assert model_cache.get("hello", "m") == response


def test_miss_returns_none(model_cache):
    assert model_cache.get("never stored", "m") is None


def test_keys_depend_on_model(model_cache):
    model_cache.set("hello", "model-a", EmbeddingResponse("hello", [1.0]))
    assert model_cache.get("hello", "model-b") is None


def test_key_format():
    key = ModelCache._generate_key("hello", "text-embedding-3-small")
    prefix, digest = key.split(":")
    assert prefix == "text-embedding-3-small"
    assert len(digest) == 32
    assert key == ModelCache._generate_key("hello", "text-embedding-3-small")


def test_clear_and_stats(model_cache):
    model_cache.set("a", "m", EmbeddingResponse("a", [1.0]))
    model_cache.set("b", "m", EmbeddingResponse("b", [2.0]))
    stats = model_cache.get_cache_stats()
    assert stats["entry_count"] == 2
    assert stats["cache_dir"] == str(model_cache.cache_dir)

    model_cache.clear()
    assert model_cache.get_cache_stats()["entry_count"] == 0


def test_relative_cache_dir_resolves_against_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cache = ModelCache(cache_dir="relative-cache")
    try:
        assert cache.cache_dir == tmp_path / "relative-cache"
        assert cache.cache_dir.is_dir()
    finally:
        cache.close()


def test_cache_dir_from_env_set_after_import(tmp_path, monkeypatch):
    target = tmp_path / "from-env"
    monkeypatch.setenv("BERT_EMBEDDINGS_CACHE_DIR", str(target))
    cache = ModelCache()
    try:
        assert cache.cache_dir == Path(target)
    finally:
        cache.close()
