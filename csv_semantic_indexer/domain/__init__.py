"""Dominio: modelos de chunking/headers y puertos (Protocols)."""

from .entities import ChunkSpec, HeaderRow, TextChunk, ToolIdentity, reconstruct
from .services import (
    DescriptionBuilder,
    HeaderExtractorService,
    RecordLookup,
    TextChunkerService,
)

__all__ = [
    "ChunkSpec",
    "HeaderRow",
    "TextChunk",
    "ToolIdentity",
    "reconstruct",
    "TextChunkerService",
    "HeaderExtractorService",
    "RecordLookup",
    "DescriptionBuilder",
]
