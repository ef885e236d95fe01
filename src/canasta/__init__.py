"""Canasta: basketball shot tracking with team and per-player shooting statistics."""

__version__ = "0.1.0"
