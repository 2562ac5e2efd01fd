"""
Variable canonicalization.
"""
from .variable_canonicalizer import VariableCanonicalizer

__all__ = ["VariableCanonicalizer"]
