"""
External Reasoner and Embedder clients.
"""
from .embedder import Embedder, OpenAIEmbedder, embed_texts
from .reasoner import Message, OpenAIReasoner, Reasoner, ReasonerOptions

__all__ = [
    "Embedder",
    "OpenAIEmbedder",
    "embed_texts",
    "Message",
    "OpenAIReasoner",
    "Reasoner",
    "ReasonerOptions",
]
