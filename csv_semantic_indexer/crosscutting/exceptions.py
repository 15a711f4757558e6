"""
===============================================================================
MÓDULO: Excepciones tipadas del indexador (chunking + extracción de headers)
===============================================================================

Objetivo
--------
Distinguir cada modo de falla con un tipo propio, para que el caller decida
(reintentar, degradar a lista vacía, abortar) sin parsear mensajes.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  IndexerError + subclases

Responsabilidades:
  - Exponer un `code` estable por tipo (logs / métricas del host)
  - Transportar el contexto útil (status HTTP, URL, timeout, causa original)

Colaboradores:
  - infrastructure/text/chunker.py (ConfigError)
  - infrastructure/tabular/header_extractor.py (errores de fetch/parsing)
  - application/column_discovery.py (fallback best-effort)
===============================================================================
"""

from __future__ import annotations


class IndexerError(Exception):
    """Base de todos los errores del core."""

    code: str = "INDEXER_ERROR"

    def __init__(
        self, message: str, *, original_error: BaseException | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigError(IndexerError, ValueError):
    """
    Configuración inválida detectada al construir un componente.

    Hereda de ValueError para que los callers que ya capturan ValueError
    sigan funcionando.
    """

    code = "CONFIG_ERROR"


class HeaderExtractionError(IndexerError):
    """Base de las fallas de `get_header_row` (fetch, red, timeout, parsing)."""

    code = "HEADER_EXTRACTION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message, original_error=original_error)
        self.url = url


class FetchError(HeaderExtractionError):
    """El servidor respondió con un status no-2xx."""

    code = "FETCH_ERROR"

    def __init__(self, status_code: int, *, url: str = "") -> None:
        super().__init__(
            f"Failed to fetch CSV header: HTTP {status_code}", url=url
        )
        self.status_code = status_code


class FetchTimeoutError(HeaderExtractionError, TimeoutError):
    """
    Se venció el deadline antes de obtener la primera fila.

    Hereda de TimeoutError para que `except TimeoutError` también la capture.
    """

    code = "FETCH_TIMEOUT"

    def __init__(
        self,
        timeout_ms: int,
        *,
        url: str = "",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"Timed out after {timeout_ms}ms fetching CSV header",
            url=url,
            original_error=original_error,
        )
        self.timeout_ms = timeout_ms


class NetworkError(HeaderExtractionError):
    """Falla de transporte (DNS, conexión rechazada, reset, protocolo)."""

    code = "NETWORK_ERROR"


class ParseError(HeaderExtractionError):
    """El stream no permitió extraer ni una fila (bytes inválidos, quoting roto, límite)."""

    code = "PARSE_ERROR"
