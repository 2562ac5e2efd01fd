"""
Polarity verification.
"""
from .polarity import PolarityVerifier, resolve_polarity

__all__ = ["PolarityVerifier", "resolve_polarity"]
