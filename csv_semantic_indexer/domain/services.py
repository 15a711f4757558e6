"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos (Protocols) del core y de los colaboradores externos

Responsabilidades:
    - Definir los contratos que implementa este paquete (chunker, extractor).
    - Definir los contratos que consume el host (lookup de registros,
      serialización de la descripción), sin implementarlos.

Colaboradores:
    - infrastructure/*: implementaciones concretas.
    - application/*: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from .entities import HeaderRow, TextChunk


class TextChunkerService(Protocol):
    """Contrato para partir texto en chunks determinísticos y reconstruibles."""

    def chunk(self, text: str) -> list[TextChunk]: ...


class HeaderExtractorService(Protocol):
    """Contrato para obtener los nombres de columna de un CSV remoto."""

    async def get_header_row(
        self, url: str, timeout_ms: int | None = None
    ) -> HeaderRow: ...


class RecordLookup(Protocol):
    """Lookup de metadata en el registro (lo provee el host)."""

    async def get_dataset_record(
        self, distribution_id: str
    ) -> Mapping[str, Any] | None: ...


class DescriptionBuilder(Protocol):
    """Serializa la descripción del dataset que después se chunkea (host)."""

    def build(
        self, record: Mapping[str, Any], *, columns: HeaderRow, url: str
    ) -> str: ...
