"""
Run configuration.
"""
from .config import Config, configure_logging

__all__ = ["Config", "configure_logging"]
