"""
Terminal pipeline errors.

An empty relationship list is a valid outcome and is never raised.
"""


class ExtractionError(Exception):
    """Base class for errors that stop an extraction run."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class ParseFailure(ExtractionError):
    """Reasoner output could not be repaired into a JSON structure."""


class SchemaInvalid(ExtractionError):
    """Parsed structure violates the relationship schema after reformatting."""


class MergeFailure(ExtractionError):
    """The variable merge round-trip returned unusable output."""


class SnippetLookupError(ExtractionError):
    """A snippet was requested from a source text with no sentences."""
