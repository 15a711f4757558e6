"""
===============================================================================
MÓDULO: Timer (medición de latencia para logs)
===============================================================================

CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  Timer

Responsabilidades:
  - Medir elapsed time con perf_counter (uso manual o context manager)
  - Exponer el resultado en ms, listo para `extra={"elapsed_ms": ...}`

Colaboradores:
  - infrastructure/tabular/header_extractor.py
===============================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Timer:
    """Cronómetro simple; sigue corriendo hasta `stop()`."""

    _start_time: Optional[float] = field(default=None, repr=False)
    _end_time: Optional[float] = field(default=None, repr=False)

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._end_time = None
        return self

    def stop(self) -> "Timer":
        if self._start_time is None:
            raise RuntimeError("Timer no iniciado")
        self._end_time = time.perf_counter()
        return self

    @property
    def elapsed_ms(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else time.perf_counter()
        return round((end - self._start_time) * 1000, 2)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()
