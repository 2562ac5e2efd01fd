"""
Data models for the causal graph.
"""
from typing import List

from pydantic import BaseModel


class FeedbackLoop(BaseModel):
    """A closed chain of causal links."""
    variables: List[str]
    loop_type: str  # "reinforcing" or "balancing"
    negative_links: int
