"""
===============================================================================
CRC CARD — infrastructure/text/chunker.py
===============================================================================

Componente:
  TextChunker (chunking con overlap y reconstrucción exacta)

Responsabilidades:
  - Partir la descripción de un dataset en chunks de a lo sumo `max_length`
    caracteres, con `overlap_length` caracteres repetidos del chunk previo.
  - Garantizar que "".join(c.text[c.overlap:]) == texto original.
  - Opcional: preferir cortes naturales (párrafos, saltos, oraciones).

Colaboradores:
  - domain/entities.py (ChunkSpec, TextChunk)

Decisiones:
  - Validación en el constructor (ConfigError); `chunk()` es total.
  - No se emite un chunk que no aporte caracteres nuevos: la emisión corta
    apenas un chunk llega al final del texto.
  - Nunca se mergea la cola: ningún chunk supera `max_length`.
===============================================================================
"""

from __future__ import annotations

from typing import Final

from ...crosscutting.logger import logger
from ...domain.entities import ChunkSpec, TextChunk

# Separadores en orden de prioridad (mejor a peor).
_SEPARATORS: Final[list[str]] = ["\n\n", "\n", ". ", "; ", ", ", " "]


def _find_best_split(text: str, *, start: int, min_end: int, max_end: int) -> int:
    """
    Busca el mejor punto de corte en [min_end, max_end].

    Estrategia:
      - Para cada separador (en prioridad), el último que termine dentro del rango.
      - Si no hay ninguno, corte duro en `max_end`.

    Devuelve:
      - índice donde cortar (después del separador).
    """
    for sep in _SEPARATORS:
        lo = max(start, min_end - len(sep))
        pos = text.rfind(sep, lo, max_end)
        if pos != -1:
            return pos + len(sep)
    return max_end


class TextChunker:
    """
    Chunker de ventana deslizante.

    Modo por defecto: paso fijo `max_length - overlap_length`.
    Modo `boundary_aware`: cada chunk no-final termina en el mejor separador
    de la segunda mitad de su ventana; el siguiente arranca `overlap_length`
    caracteres antes de ese corte.
    """

    def __init__(
        self, max_length: int, overlap_length: int, *, boundary_aware: bool = False
    ):
        self.spec = ChunkSpec(max_length=max_length, overlap_length=overlap_length)
        self.boundary_aware = boundary_aware

    @property
    def max_length(self) -> int:
        return self.spec.max_length

    @property
    def overlap_length(self) -> int:
        return self.spec.overlap_length

    def chunk(self, text: str) -> list[TextChunk]:
        if not text:
            return []

        if len(text) <= self.spec.max_length:
            return [TextChunk(text=text, position=0, length=len(text), overlap=0)]

        if self.boundary_aware:
            chunks = self._chunk_on_boundaries(text)
        else:
            chunks = self._chunk_fixed_step(text)

        logger.debug(
            "Text chunked",
            extra={
                "text_chars": len(text),
                "chunk_count": len(chunks),
                "max_length": self.spec.max_length,
                "overlap_length": self.spec.overlap_length,
            },
        )
        return chunks

    def _chunk_fixed_step(self, text: str) -> list[TextChunk]:
        n = len(text)
        chunks: list[TextChunk] = []
        position = 0

        while True:
            end = min(position + self.spec.max_length, n)
            chunks.append(
                TextChunk(
                    text=text[position:end],
                    position=position,
                    length=end - position,
                    overlap=self.spec.overlap_length if chunks else 0,
                )
            )
            if end == n:
                return chunks
            position += self.spec.step

    def _chunk_on_boundaries(self, text: str) -> list[TextChunk]:
        n = len(text)
        chunks: list[TextChunk] = []
        prev_end = 0

        while prev_end < n:
            overlap = self.spec.overlap_length if chunks else 0
            position = prev_end - overlap
            hard_end = min(position + self.spec.max_length, n)

            if hard_end == n:
                end = n
            else:
                # Cada chunk aporta al menos un caracter nuevo, y el primero llega
                # hasta overlap_length para que el siguiente no arranque antes de 0.
                min_end = max(
                    prev_end + 1,
                    position + self.spec.max_length // 2,
                    self.spec.overlap_length + 1,
                )
                end = _find_best_split(
                    text, start=position, min_end=min_end, max_end=hard_end
                )

            chunks.append(
                TextChunk(
                    text=text[position:end],
                    position=position,
                    length=end - position,
                    overlap=overlap,
                )
            )
            prev_end = end

        return chunks
