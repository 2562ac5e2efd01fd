"""
Data models for the Causal Sage API.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from .graph import FeedbackLoop
from .relationship import Relationship


class ExtractRequest(BaseModel):
    """Request model for relationship extraction."""
    text: str
    threshold: Optional[float] = Field(default=None, gt=0.0, le=1.0)
    diagram: bool = False
    xmile: bool = False


class ExtractResponse(BaseModel):
    """Response model for the extract endpoint."""
    lines: List[str]
    relationships: List[Relationship]
    feedback_loops: List[FeedbackLoop]
    dot: Optional[str] = None
    xmile: Optional[str] = None
