"""Casos de uso del lado del host (fallbacks y seams de integración)."""

from .column_discovery import discover_columns
from .description_chunking import chunk_description

__all__ = ["discover_columns", "chunk_description"]
