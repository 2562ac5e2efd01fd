"""
Causal graph and feedback loop analysis.
"""
from .causal_graph import CausalGraph

__all__ = ["CausalGraph"]
