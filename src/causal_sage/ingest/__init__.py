"""
Extraction pipeline orchestration.
"""
from .extraction_pipeline import ExtractionPipeline

__all__ = ["ExtractionPipeline"]
