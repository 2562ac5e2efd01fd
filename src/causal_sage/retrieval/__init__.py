"""
Traceability from relationships back to the source text.
"""
from .snippet_locator import SnippetLocator

__all__ = ["SnippetLocator"]
