"""
Diagram rendering.
"""
from .diagram import render_dot, render_xmile

__all__ = ["render_dot", "render_xmile"]
