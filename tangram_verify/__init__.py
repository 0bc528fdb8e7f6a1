"""Tangram piece verification: match detected outlines to puzzle targets."""

__version__ = "0.1.0"
