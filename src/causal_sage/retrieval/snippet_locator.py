"""
Embedding-based lookup of the source sentence behind a relationship.
"""
import logging
from typing import List, Optional

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from ..errors import SnippetLookupError
from ..llm import Embedder, embed_texts
from ..utils import split_sentences

logger = logging.getLogger(__name__)


class SnippetLocator:
    """Finds the sentence of the source text most similar to a query."""

    def __init__(self, config, embedder: Embedder, text: str):
        """
        Initialize snippet locator.

        Args:
            config: Configuration object
            embedder: Embedder used for sentences and queries
            text: Source text the relationships were extracted from
        """
        self.config = config
        self.embedder = embedder
        self.sentences: List[str] = split_sentences(text)
        self.sentence_matrix: Optional[np.ndarray] = None
        self._fitted = False

    def fit(self):
        """Embed every sentence of the source once."""
        self.sentence_matrix = embed_texts(
            self.embedder,
            self.sentences,
            model=self.config.embedding_model,
            max_workers=self.config.embedding_max_workers,
        )
        self._fitted = True
        logger.debug("Embedded %d source sentences", len(self.sentences))

    def locate(self, query: str) -> str:
        """
        Return the source sentence with the highest cosine similarity.

        Ties go to the earliest sentence.

        Args:
            query: Relationship text or reasoning

        Returns:
            Best matching sentence

        Raises:
            SnippetLookupError: If the source text has no sentences
        """
        if not self.sentences:
            raise SnippetLookupError("snippet", "source text contains no sentences to match against")
        if not self._fitted:
            self.fit()

        query_vector = np.asarray(
            [self.embedder.embed(query, self.config.embedding_model)], dtype=float
        )
        similarities = cosine_similarity(query_vector, self.sentence_matrix)[0]

        best_idx = 0
        best_score = similarities[0]
        for idx in range(1, len(similarities)):
            if similarities[idx] > best_score:
                best_idx = idx
                best_score = similarities[idx]
        return self.sentences[best_idx]
