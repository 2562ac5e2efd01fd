"""
Data models for causal relationships.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator

from ..utils import (
    NEGATIVE_SYMBOL,
    POSITIVE_SYMBOL,
    format_relationship,
    normalize_variable,
)


class Polarity(str, Enum):
    """Causal polarity of a relationship."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    INCREASE = "increase"
    DECREASE = "decrease"

    def resolved(self) -> "Polarity":
        """Collapse the directional aliases onto positive/negative."""
        if self in (Polarity.POSITIVE, Polarity.INCREASE):
            return Polarity.POSITIVE
        return Polarity.NEGATIVE

    @property
    def symbol(self) -> str:
        return POSITIVE_SYMBOL if self.resolved() is Polarity.POSITIVE else NEGATIVE_SYMBOL

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Polarity"]:
        if symbol == POSITIVE_SYMBOL:
            return cls.POSITIVE
        if symbol == NEGATIVE_SYMBOL:
            return cls.NEGATIVE
        return None


class Relationship(BaseModel):
    """A directed causal edge between two variables."""
    subject: str
    predicate: Optional[Polarity] = None
    object: str
    reasoning: Optional[str] = None
    source_snippet: Optional[str] = None

    @field_validator("subject", "object")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_variable(value)

    @model_validator(mode="after")
    def _check_endpoints(self) -> "Relationship":
        if not self.subject or not self.object:
            raise ValueError("subject and object must be non-empty")
        if self.subject == self.object:
            raise ValueError(f"subject and object are identical: {self.subject!r}")
        return self

    @property
    def symbol(self) -> str:
        """Polarity marker; an unresolved predicate renders as positive."""
        if self.predicate is None:
            return POSITIVE_SYMBOL
        return self.predicate.symbol

    @property
    def text(self) -> str:
        return format_relationship(self)

    def edge_key(self):
        return (self.subject, self.symbol, self.object)


class ExtractionResult(BaseModel):
    """Final, numbered output of one extraction run."""
    relationships: List[Relationship] = []
    raw_response: Optional[str] = None

    def lines(self) -> List[str]:
        """Relationship strings in the form "<n>. subject -->(+) object"."""
        return [format_relationship(rel, i) for i, rel in enumerate(self.relationships, start=1)]

    def to_text(self) -> str:
        return "\n".join(self.lines())