"""Utilidades de texto (chunking)."""

from .chunker import TextChunker

__all__ = ["TextChunker"]
