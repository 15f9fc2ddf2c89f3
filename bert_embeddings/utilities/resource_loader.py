"""
Reading content behind a resource reference (local path, file:// or http(s):// URL).
"""

import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx

from bert_embeddings.errors import ResourceLoadError
from bert_embeddings.schemas.embedding_schemas import ResourceReference

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)


def _read_file(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"Could not read {path}: {e}") from e


async def load_resource(
    resource_reference: ResourceReference,
    encoding: str = "utf-8",
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0,
) -> str:
    """
    Return the text behind a resource reference.

    Args:
        resource_reference: Filesystem path, file:// URL or http(s):// URL
        encoding: Encoding used for local files
        http_client: Optional client to reuse for remote resources
        timeout: Timeout in seconds when a client has to be created

    Raises:
        ResourceLoadError: missing file, non-2xx response or unsupported scheme
    """
    if isinstance(resource_reference, os.PathLike):
        return _read_file(Path(resource_reference), encoding)

    parsed = urlparse(str(resource_reference))
    scheme = parsed.scheme.lower()

    # Single letters are Windows drive letters, not schemes
    if not scheme or len(scheme) == 1:
        return _read_file(Path(resource_reference), encoding)

    if scheme == "file":
        return _read_file(Path(unquote(parsed.path)), encoding)

    if scheme in ("http", "https"):
        logger.info("Fetching remote resource %s", resource_reference)
        if http_client is not None:
            return await _fetch(http_client, str(resource_reference))
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await _fetch(client, str(resource_reference))

    raise ResourceLoadError(f"Unsupported resource scheme '{scheme}': {resource_reference}")


async def _fetch(client: httpx.AsyncClient, url: str) -> str:
    try:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ResourceLoadError(f"Could not fetch {url}: {e}") from e
    return response.text
