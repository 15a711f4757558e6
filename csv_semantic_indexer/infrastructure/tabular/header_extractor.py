"""
============================================================
TARJETA CRC — infrastructure/tabular/header_extractor.py
============================================================
Class: CsvHeaderExtractor

Responsibilities:
  - Obtener los nombres de columna de un CSV remoto (solo por URL).
  - GET con redirects y User-Agent del producto; sin body.
  - Carrera explícita respuesta vs deadline: gana el primero, el perdedor
    se cancela (request en vuelo) y el timer nunca sobrevive a la llamada.
  - Leer el body en streaming y cortar apenas aparece la primera fila.
  - Cerrar explícitamente el stream de respuesta al resolver temprano.
  - Traducir cada falla a un error tipado (Fetch/Timeout/Network/Parse).

Collaborators:
  - domain.entities (ToolIdentity, HeaderRow)
  - infrastructure.tabular.first_row (FirstRowReader)
  - crosscutting.exceptions / crosscutting.logger / crosscutting.timing
  - httpx (HTTP client async)
============================================================
"""

from __future__ import annotations

import asyncio
import codecs
import csv

import httpx

from ...crosscutting.exceptions import (
    ConfigError,
    FetchError,
    FetchTimeoutError,
    HeaderExtractionError,
    NetworkError,
    ParseError,
)
from ...crosscutting.logger import logger
from ...crosscutting.timing import Timer
from ...domain.entities import HeaderRow, ToolIdentity
from .first_row import FirstRowReader

DEFAULT_TIMEOUT_MS = 120_000
DEFAULT_MAX_HEADER_BYTES = 1024 * 1024


def _incremental_decoder(charset: str | None) -> codecs.IncrementalDecoder:
    """Decoder incremental para el charset de la respuesta (UTF-8 con BOM por defecto)."""
    try:
        info = codecs.lookup(charset or "utf-8")
    except LookupError:
        logger.warning(
            "Charset desconocido en respuesta CSV, se usa utf-8",
            extra={"charset": charset},
        )
        info = codecs.lookup("utf-8")

    # utf-8-sig descarta el BOM si viene, y si no viene decodifica igual.
    if info.name == "utf-8":
        info = codecs.lookup("utf-8-sig")
    return info.incrementaldecoder(errors="strict")


class CsvHeaderExtractor:
    """
    Extrae la fila de headers de un CSV remoto sin descargar el archivo entero.

    Cada llamada abre su propio AsyncClient: no hay estado compartido entre
    llamadas concurrentes. `identity` viene por valor desde la configuración.
    """

    def __init__(
        self,
        identity: ToolIdentity,
        *,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_header_bytes: int = DEFAULT_MAX_HEADER_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if default_timeout_ms <= 0:
            raise ConfigError(f"timeout_ms must be > 0, got {default_timeout_ms}")
        if max_header_bytes <= 0:
            raise ConfigError(f"max_header_bytes must be > 0, got {max_header_bytes}")

        self._identity = identity
        self._default_timeout_ms = default_timeout_ms
        self._max_header_bytes = max_header_bytes
        self._transport = transport

    @property
    def identity(self) -> ToolIdentity:
        return self._identity

    async def get_header_row(self, url: str, timeout_ms: int | None = None) -> HeaderRow:
        """
        Devuelve las columnas (trimmeadas, sin vacías) de la primera fila.

        Raises:
            FetchError: status no-2xx (sin retry).
            FetchTimeoutError: venció el deadline; el request fue cancelado.
            NetworkError: falla de transporte (DNS, conexión, reset).
            ParseError: bytes/quoting inválidos o fila más grande que el límite.
        """
        if timeout_ms is None:
            timeout_ms = self._default_timeout_ms
        if timeout_ms <= 0:
            raise ConfigError(f"timeout_ms must be > 0, got {timeout_ms}")

        timer = Timer().start()
        logger.debug("Fetching CSV header", extra={"url": url, "timeout_ms": timeout_ms})

        try:
            # wait_for cancela la tarea perdedora y limpia su timer en todos los caminos.
            row = await asyncio.wait_for(
                self._fetch_first_row(url, timeout_ms), timeout=timeout_ms / 1000
            )
        except HeaderExtractionError as exc:
            # Va antes que asyncio.TimeoutError: FetchTimeoutError también lo es.
            logger.warning(
                "CSV header extraction failed",
                extra={
                    "url": url,
                    "error_code": exc.code,
                    "error": exc.message,
                    "elapsed_ms": timer.elapsed_ms,
                },
            )
            raise
        except asyncio.TimeoutError as exc:
            logger.warning(
                "CSV header fetch timed out",
                extra={"url": url, "timeout_ms": timeout_ms, "elapsed_ms": timer.elapsed_ms},
            )
            raise FetchTimeoutError(timeout_ms, url=url, original_error=exc) from exc

        logger.info(
            "CSV header extracted",
            extra={"url": url, "column_count": len(row), "elapsed_ms": timer.elapsed_ms},
        )
        return row

    async def _fetch_first_row(self, url: str, timeout_ms: int) -> HeaderRow:
        async with httpx.AsyncClient(
            transport=self._transport,
            follow_redirects=True,
            headers={"User-Agent": self._identity.user_agent},
            timeout=httpx.Timeout(timeout_ms / 1000),
        ) as client:
            try:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchError(response.status_code, url=url)
                    try:
                        return await self._read_first_row(response, url)
                    finally:
                        # Resolución temprana: liberar la conexión sin drenar el body.
                        await response.aclose()
            except httpx.TimeoutException as exc:
                raise FetchTimeoutError(timeout_ms, url=url, original_error=exc) from exc
            except httpx.DecodingError as exc:
                raise ParseError(
                    f"Could not decode CSV response body: {exc}",
                    url=url,
                    original_error=exc,
                ) from exc
            except (httpx.RequestError, httpx.InvalidURL) as exc:
                raise NetworkError(
                    f"Network error fetching CSV header: {exc}",
                    url=url,
                    original_error=exc,
                ) from exc

    async def _read_first_row(self, response: httpx.Response, url: str) -> HeaderRow:
        decoder = _incremental_decoder(response.charset_encoding)
        reader = FirstRowReader()
        consumed = 0

        try:
            async for data in response.aiter_bytes():
                consumed += len(data)
                row = reader.feed(decoder.decode(data))
                if row is not None:
                    return row
                if consumed > self._max_header_bytes:
                    raise ParseError(
                        f"No complete CSV row within the first {self._max_header_bytes} bytes",
                        url=url,
                    )

            row = reader.feed(decoder.decode(b"", final=True))
            return row if row is not None else reader.finish()
        except (UnicodeDecodeError, csv.Error) as exc:
            raise ParseError(
                f"Malformed CSV header: {exc}", url=url, original_error=exc
            ) from exc
