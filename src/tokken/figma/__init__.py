"""Figma REST API access."""

from .client import FigmaClient
from .retry import RetryPolicy

__all__ = ["FigmaClient", "RetryPolicy"]
