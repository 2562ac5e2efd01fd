"""
Embedder service boundary and concurrent fan-out.
"""
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import numpy as np
from openai import OpenAI

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Maps text to a fixed-length real vector."""

    @abstractmethod
    def embed(self, text: str, model: Optional[str] = None) -> List[float]:
        """
        Embed a single text.

        Args:
            text: Input text
            model: Optional embedding model override

        Returns:
            Embedding vector (not necessarily normalized)
        """


class OpenAIEmbedder(Embedder):
    """Embedder backed by an OpenAI-compatible embeddings endpoint."""

    def __init__(self, config, client: Optional[OpenAI] = None):
        self.config = config
        self.client = client or OpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.request_timeout,
        )

    def embed(self, text: str, model: Optional[str] = None) -> List[float]:
        clean = text.replace("\n", " ")
        response = self.client.embeddings.create(
            model=model or self.config.embedding_model,
            input=clean,
        )
        return list(response.data[0].embedding)


def embed_texts(
    embedder: Embedder,
    texts: List[str],
    model: Optional[str] = None,
    max_workers: int = 8,
) -> np.ndarray:
    """
    Embed independent texts concurrently.

    Args:
        embedder: Embedder instance
        texts: Texts to embed
        model: Optional embedding model override
        max_workers: Thread pool width

    Returns:
        Matrix of shape [len(texts), dim], rows in input order
    """
    if not texts:
        return np.zeros((0, 0), dtype=float)

    with ThreadPoolExecutor(max_workers=min(max_workers, len(texts))) as executor:
        vectors = list(executor.map(lambda t: embedder.embed(t, model), texts))

    dims = {len(v) for v in vectors}
    if len(dims) != 1:
        raise ValueError(f"Embedder returned vectors of differing lengths: {sorted(dims)}")

    logger.debug("Embedded %d texts (dim=%d)", len(texts), dims.pop())
    return np.asarray(vectors, dtype=float)
