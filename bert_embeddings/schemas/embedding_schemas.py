"""
Core Schemas storing text and embeddings.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

ResourceReference = Union[str, os.PathLike]
EmbeddingMatrix = Sequence[Sequence[float]]


@dataclass
class EmbeddingResponse:
    """Container for embedding response data"""

    text: str
    embedding: Optional[List[float]]


@dataclass(frozen=True)
class EmbeddingRecord:
    """
    Provenance marker paired with a precomputed embedding matrix.

    Build records through one of the two constructors:
    - ``EmbeddingRecord.from_resource`` when content came from a path or URL
    - ``EmbeddingRecord.from_text`` when content was supplied inline

    Each row of ``embeddings`` is one vector. The matrix is frozen into a
    tuple of tuples on construction, row and component order preserved.
    Compare against list-of-lists input through ``to_list()``; ``embeddings``
    itself only equals the same matrix written as tuples.
    Nothing enforces that exactly one of ``resource_reference`` and
    ``text_content`` is set.
    """

    embeddings: Tuple[Tuple[float, ...], ...]
    resource_reference: Optional[ResourceReference] = None
    text_content: Optional[str] = None

    def __post_init__(self):
        frozen = tuple(tuple(row) for row in self.embeddings)
        object.__setattr__(self, "embeddings", frozen)

    @classmethod
    def from_resource(
        cls, resource_reference: ResourceReference, embeddings: EmbeddingMatrix
    ) -> "EmbeddingRecord":
        """Record for content identified by a path or URL."""
        return cls(embeddings=embeddings, resource_reference=resource_reference)

    @classmethod
    def from_text(cls, text_content: str, embeddings: EmbeddingMatrix) -> "EmbeddingRecord":
        """Record for content supplied inline."""
        return cls(embeddings=embeddings, text_content=text_content)

    @property
    def num_vectors(self) -> int:
        return len(self.embeddings)

    def to_list(self) -> List[List[float]]:
        """Fresh, mutable copy of the matrix."""
        return [list(row) for row in self.embeddings]

    def as_array(self, dtype=np.float32) -> np.ndarray:
        """
        Fresh numpy copy of the matrix with shape (rows, dim).

        An empty matrix gives shape (0, 0).
        """
        if not self.embeddings:
            return np.empty((0, 0), dtype=dtype)
        return np.array(self.embeddings, dtype=dtype)
