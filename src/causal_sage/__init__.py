"""
Causal Sage: causal relationship extraction and causal loop diagrams.
"""
from .config import Config, configure_logging
from .errors import (
    ExtractionError,
    MergeFailure,
    ParseFailure,
    SchemaInvalid,
    SnippetLookupError,
)
from .ingest import ExtractionPipeline
from .schema import ExtractionResult, Polarity, Relationship

__all__ = [
    "Config",
    "configure_logging",
    "ExtractionError",
    "MergeFailure",
    "ParseFailure",
    "SchemaInvalid",
    "SnippetLookupError",
    "ExtractionPipeline",
    "ExtractionResult",
    "Polarity",
    "Relationship",
]
