"""
Data models for Causal Sage.
"""
from .api import ExtractRequest, ExtractResponse
from .graph import FeedbackLoop
from .relationship import ExtractionResult, Polarity, Relationship

__all__ = [
    "ExtractRequest",
    "ExtractResponse",
    "FeedbackLoop",
    "ExtractionResult",
    "Polarity",
    "Relationship",
]
