"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Modelos del core (chunking + identificación de requests)

Responsabilidades:
    - ChunkSpec: configuración validada del chunker (fail-fast al construir).
    - TextChunk: segmento de texto con offset y overlap sobre el original.
    - ToolIdentity: datos estáticos para etiquetar requests salientes.
    - reconstruct(): invariante de reconstrucción exacta como función pura.

Colaboradores:
    - infrastructure/text/chunker.py
    - infrastructure/tabular/header_extractor.py
    - container.py (arma ToolIdentity desde Settings)

Reglas:
    - Todo es inmutable y vive solo dentro de una llamada.
    - Sin I/O.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ..crosscutting.exceptions import ConfigError

# Columnas de un CSV (trimmeadas, sin vacíos). Puede ser lista vacía.
HeaderRow = list[str]

OVERLAP_TOO_LARGE_MESSAGE = "Overlap must be smaller than chunk size"


@dataclass(frozen=True)
class ChunkSpec:
    """Tamaño máximo de chunk y overlap hacia atrás (en caracteres)."""

    max_length: int
    overlap_length: int

    def __post_init__(self) -> None:
        if self.max_length <= 0:
            raise ConfigError(f"Chunk size must be > 0, got {self.max_length}")
        if self.overlap_length < 0:
            raise ConfigError(f"Overlap must be >= 0, got {self.overlap_length}")
        if self.overlap_length >= self.max_length:
            raise ConfigError(OVERLAP_TOO_LARGE_MESSAGE)

    @property
    def step(self) -> int:
        """Avance entre inicios de chunks consecutivos."""
        return self.max_length - self.overlap_length


@dataclass(frozen=True)
class TextChunk:
    """
    Segmento contiguo del texto original.

    Notas:
      - position: offset del primer caracter en el texto original.
      - overlap: cuántos caracteres iniciales repiten el final del chunk previo.
    """

    text: str
    position: int
    length: int
    overlap: int

    @property
    def new_text(self) -> str:
        """La parte que este chunk aporta por primera vez."""
        return self.text[self.overlap :]

    @property
    def end(self) -> int:
        return self.position + self.length


def reconstruct(chunks: list[TextChunk]) -> str:
    """Concatena `chunk.text[overlap:]`; devuelve el texto original exacto."""
    return "".join(chunk.new_text for chunk in chunks)


@dataclass(frozen=True)
class ToolIdentity:
    """Nombre/versión del producto que se envía como User-Agent."""

    name: str
    version: str

    @property
    def user_agent(self) -> str:
        return f"{self.name}/{self.version}"
