"""
===============================================================================
TARJETA CRC — container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer el chunker y el extractor de headers a partir de Settings.
  - Construir ToolIdentity UNA vez y pasarla por valor al extractor.
  - Mantener singletons con caching (lru_cache).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.services.* (puertos)
  - infrastructure.* (implementaciones)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Los componentes no guardan estado entre llamadas: compartir la
    instancia entre callers concurrentes es seguro.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .crosscutting.config import get_settings
from .domain.entities import ToolIdentity
from .domain.services import HeaderExtractorService, TextChunkerService
from .infrastructure.tabular import CsvHeaderExtractor
from .infrastructure.text import TextChunker


@lru_cache(maxsize=1)
def get_tool_identity() -> ToolIdentity:
    """Nombre/versión del producto para el User-Agent (se calcula una vez)."""
    settings = get_settings()
    return ToolIdentity(name=settings.tool_name, version=settings.tool_version)


@lru_cache(maxsize=1)
def get_text_chunker() -> TextChunkerService:
    settings = get_settings()
    return TextChunker(
        settings.chunk_size_limit,
        settings.chunk_overlap,
        boundary_aware=settings.chunk_boundary_aware,
    )


@lru_cache(maxsize=1)
def get_header_extractor() -> HeaderExtractorService:
    settings = get_settings()
    return CsvHeaderExtractor(
        get_tool_identity(),
        default_timeout_ms=settings.header_fetch_timeout_ms,
        max_header_bytes=settings.header_max_bytes,
    )


def reset_container() -> None:
    """Limpia singletons (tests / recarga de config)."""
    get_tool_identity.cache_clear()
    get_text_chunker.cache_clear()
    get_header_extractor.cache_clear()
