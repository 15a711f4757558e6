"""Core de un indexador semántico para datasets CSV (headers remotos + chunking)."""

__version__ = "0.1.0"
