"""
Pytest configuration and fixtures for Causal Sage tests
"""
import math
import threading
from typing import Dict, List, Optional

import pytest

from causal_sage.config import Config
from causal_sage.llm import Embedder, Message, Reasoner, ReasonerOptions

DIM = 64

SAMPLE_TEXT = "When death rate goes up, population decreases."

SAMPLE_KEYED_RESPONSE = """{
  "1": {
    "reasoning": "Because higher death reduces population",
    "causal relationship": "death rate -->(-) population",
    "relevant text": "When death rate goes up, population decreases."
  }
}"""


def vec(*values: float) -> List[float]:
    """Pad leading components to a DIM-length vector."""
    return list(values) + [0.0] * (DIM - len(values))


def similar_to_first(similarity: float) -> List[float]:
    """Unit vector whose cosine with vec(1.0) equals `similarity`."""
    return vec(similarity, math.sqrt(1.0 - similarity ** 2))


class FakeReasoner(Reasoner):
    """Returns canned responses in order and records every call."""

    def __init__(self, responses: List[str]):
        self.responses = list(responses)
        self.calls: List[List[Message]] = []
        self.options: List[ReasonerOptions] = []

    def complete(self, messages, options):
        self.calls.append(list(messages))
        self.options.append(options)
        if not self.responses:
            raise AssertionError(f"Unexpected Reasoner call #{len(self.calls)}: {messages[-1].content[:80]}")
        return self.responses.pop(0)


class FakeEmbedder(Embedder):
    """Table-driven embedder; unknown texts get their own orthogonal axis."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None):
        self.vectors = dict(vectors or {})
        self.requests: List[str] = []
        self._next_axis = 16
        self._lock = threading.Lock()

    def embed(self, text, model=None):
        with self._lock:
            self.requests.append(text)
            if text not in self.vectors:
                if self._next_axis >= DIM:
                    raise AssertionError("FakeEmbedder ran out of axes")
                self.vectors[text] = [0.0] * DIM
                self.vectors[text][self._next_axis] = 1.0
                self._next_axis += 1
            return list(self.vectors[text])


@pytest.fixture
def config():
    """Deterministic test configuration"""
    return Config(embedding_max_workers=4)


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def make_reasoner():
    """Factory for scripted reasoners"""
    def _make(*responses: str) -> FakeReasoner:
        return FakeReasoner(list(responses))
    return _make
