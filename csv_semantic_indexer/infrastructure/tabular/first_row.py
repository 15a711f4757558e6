"""
===============================================================================
CRC CARD — infrastructure/tabular/first_row.py
===============================================================================

Componente:
  FirstRowReader (parser CSV incremental, solo primera fila)

Responsabilidades:
  - Recibir texto por partes (stream) y detectar cuándo la primera fila
    no-vacía está completa, respetando campos entre comillas con saltos.
  - Inferir el delimitador entre `,` `;` `\\t` `|` a partir de esa fila.
  - Devolver los campos trimmeados y sin vacíos.

Colaboradores:
  - csv (stdlib) para el parsing final de la fila
  - infrastructure/tabular/header_extractor.py

Reglas:
  - BOM inicial ("\\ufeff") descartado.
  - Líneas en blanco se saltean; filas con cantidad de campos irregular se
    toleran (solo se mira la primera).
  - Desempate de delimitadores: gana el de más apariciones fuera de comillas;
    a igual cantidad, el primero en CANDIDATE_DELIMITERS; sin ninguno, ",".
  - Quoting inválido -> csv.Error (el caller lo traduce a ParseError).
===============================================================================
"""

from __future__ import annotations

import csv
from typing import Final

from ...domain.entities import HeaderRow

CANDIDATE_DELIMITERS: Final[tuple[str, ...]] = (",", ";", "\t", "|")

_QUOTE: Final[str] = '"'
_TERMINATORS: Final[str] = "\r\n"
_BOM: Final[str] = "\ufeff"

# Estados del scanner de registros.
_START, _FIELD, _QUOTED, _QUOTE_IN_QUOTED = range(4)


def _transition(state: int, ch: str) -> int:
    """Avanza un caracter (los terminadores fuera de comillas los maneja el caller)."""
    if state == _QUOTED:
        return _QUOTE_IN_QUOTED if ch == _QUOTE else _QUOTED
    if state == _QUOTE_IN_QUOTED and ch == _QUOTE:
        return _QUOTED
    if ch in CANDIDATE_DELIMITERS:
        return _START
    if state == _START:
        if ch == _QUOTE:
            return _QUOTED
        if ch == " ":
            return _START
    return _FIELD


def detect_delimiter(record: str) -> str:
    """Delimitador más frecuente fuera de comillas (desempate por prioridad)."""
    counts = dict.fromkeys(CANDIDATE_DELIMITERS, 0)
    state = _START
    for ch in record:
        if state != _QUOTED and ch in counts:
            counts[ch] += 1
        state = _transition(state, ch)
    # max() devuelve el primer máximo: respeta el orden de CANDIDATE_DELIMITERS.
    return max(CANDIDATE_DELIMITERS, key=lambda d: counts[d])


def parse_record(record: str) -> HeaderRow:
    """Parsea un registro completo y devuelve los campos no vacíos, trimmeados."""
    reader = csv.reader(
        [record],
        delimiter=detect_delimiter(record),
        quotechar=_QUOTE,
        skipinitialspace=True,
        strict=True,
    )
    fields = next(reader, [])
    return [field.strip() for field in fields if field.strip()]


class FirstRowReader:
    """
    Acumula texto hasta tener la primera fila no-vacía.

    Uso:
        reader = FirstRowReader()
        for text in partes:
            row = reader.feed(text)
            if row is not None:
                break
        else:
            row = reader.finish()
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._scan_pos = 0
        self._state = _START
        self._started = False
        self._row: HeaderRow | None = None

    @property
    def row(self) -> HeaderRow | None:
        return self._row

    @property
    def buffered_chars(self) -> int:
        return len(self._buffer)

    def feed(self, text: str) -> HeaderRow | None:
        """Agrega texto; devuelve la fila cuando está completa, sino None."""
        if self._row is not None:
            return self._row

        if not self._started and text:
            self._started = True
            if text.startswith(_BOM):
                text = text[len(_BOM) :]
        self._buffer += text

        while True:
            record = self._next_record()
            if record is None:
                return None
            if record.strip():
                self._row = parse_record(record)
                return self._row

    def finish(self) -> HeaderRow:
        """Fin del stream: parsea lo que quede (o lista vacía si no hay fila)."""
        if self._row is not None:
            return self._row

        rest, self._buffer = self._buffer, ""
        self._row = parse_record(rest) if rest.strip() else []
        return self._row

    def _next_record(self) -> str | None:
        buffer = self._buffer
        state = self._state

        for i in range(self._scan_pos, len(buffer)):
            ch = buffer[i]
            if state != _QUOTED and ch in _TERMINATORS:
                # "\r\n" deja un "\n" inicial: el próximo registro sale vacío y se saltea.
                self._buffer = buffer[i + 1 :]
                self._scan_pos = 0
                self._state = _START
                return buffer[:i]
            state = _transition(state, ch)

        self._scan_pos = len(buffer)
        self._state = state
        return None
