"""
Name: Description Chunking Strategy

Responsibilities:
  - Seam the host calls with the serialized dataset description
  - Delegate to the configured TextChunkerService

Collaborators:
  - domain.services.TextChunkerService
"""

from __future__ import annotations

from ..domain.entities import TextChunk
from ..domain.services import TextChunkerService


def chunk_description(chunker: TextChunkerService, text: str) -> list[TextChunk]:
    """R: Chunk the description text; empty descriptions yield no chunks."""
    return chunker.chunk(text or "")
