"""
Schema repair and relationship normalization for Reasoner output.
"""
from .json_repair import load_json
from .normalizer import NormalizedOutput, RelationshipNormalizer

__all__ = ["load_json", "NormalizedOutput", "RelationshipNormalizer"]
