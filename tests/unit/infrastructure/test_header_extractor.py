"""
===============================================================================
CRC — tests/unit/infrastructure/test_header_extractor.py

Responsibilities:
    - Validar extracción de headers (coma, BOM, filas irregulares, body vacío).
    - Validar errores tipados: HTTP no-2xx, red, parsing.
    - Validar deadline: el request en vuelo se cancela.
    - Validar lectura temprana: el stream se cierra sin drenar el body.
    - Validar redirects + User-Agent.

Collaborators:
    - CsvHeaderExtractor (SUT)
    - httpx.MockTransport (mock HTTP, sin red)
===============================================================================
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from csv_semantic_indexer.crosscutting.exceptions import (
    ConfigError,
    FetchError,
    FetchTimeoutError,
    HeaderExtractionError,
    NetworkError,
    ParseError,
)
from csv_semantic_indexer.infrastructure.tabular.header_extractor import (
    CsvHeaderExtractor,
)

pytestmark = pytest.mark.unit

_URL = "https://data.example.com/files/data.csv"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extractor(identity, handler, **kwargs) -> CsvHeaderExtractor:
    """Crea un extractor con transporte mock."""
    return CsvHeaderExtractor(identity, transport=httpx.MockTransport(handler), **kwargs)


def _body(content: bytes, status: int = 200, headers=None):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=content, headers=headers or {})

    return handler


class _EndlessCsv(httpx.AsyncByteStream):
    """Body infinito: header + filas sin fin. Registra si lo cerraron."""

    def __init__(self, header: bytes = b"a,b,c\n"):
        self.header = header
        self.rows_sent = 0
        self.closed = False

    async def __aiter__(self):
        yield self.header
        while True:
            self.rows_sent += 1
            yield b"1,2,3\n"

    async def aclose(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestHeaderExtraction:
    """Tests para la extracción de la fila de headers."""

    @pytest.mark.asyncio
    async def test_comma_csv(self, tool_identity):
        extractor = _extractor(
            tool_identity, _body(b"column1,column2,column3\nvalue1,value2,value3")
        )

        assert await extractor.get_header_row(_URL) == ["column1", "column2", "column3"]

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_list(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b""))

        assert await extractor.get_header_row(_URL) == []

    @pytest.mark.asyncio
    async def test_bom_prefixed_body(self, tool_identity):
        body = b"\xef\xbb\xbf" + b"column1,column2,column3\nvalue1,value2,value3"
        extractor = _extractor(tool_identity, _body(body))

        row = await extractor.get_header_row(_URL)

        assert row == ["column1", "column2", "column3"]
        assert not row[0].startswith("\ufeff")

    @pytest.mark.asyncio
    async def test_ragged_row_drops_blank_fields(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b"col1, ,col3,\n\nval1,val2,val3,val4"))

        assert await extractor.get_header_row(_URL) == ["col1", "col3"]

    @pytest.mark.asyncio
    async def test_semicolon_and_blank_leading_lines(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b"\r\n\r\nfecha;estacion;pm25\r\n1;2;3"))

        assert await extractor.get_header_row(_URL) == ["fecha", "estacion", "pm25"]

    @pytest.mark.asyncio
    async def test_charset_from_content_type(self, tool_identity):
        extractor = _extractor(
            tool_identity,
            _body(
                "año|región\n".encode("latin-1"),
                headers={"Content-Type": "text/csv; charset=iso-8859-1"},
            ),
        )

        assert await extractor.get_header_row(_URL) == ["año", "región"]

    @pytest.mark.asyncio
    async def test_utf16_with_bom(self, tool_identity):
        extractor = _extractor(
            tool_identity,
            _body(
                "a\tb\tc\n1\t2\t3".encode("utf-16"),
                headers={"Content-Type": "text/csv; charset=utf-16"},
            ),
        )

        assert await extractor.get_header_row(_URL) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_follows_redirects_and_sends_user_agent(self, tool_identity):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/old.csv":
                return httpx.Response(302, headers={"Location": _URL})
            return httpx.Response(200, content=b"x,y\n1,2")

        extractor = _extractor(tool_identity, handler)

        row = await extractor.get_header_row("https://data.example.com/old.csv")

        assert row == ["x", "y"]
        assert [r.url.path for r in seen] == ["/old.csv", "/files/data.csv"]
        assert all(r.method == "GET" for r in seen)
        assert all(
            r.headers["User-Agent"] == "csv-semantic-indexer/9.9.9-test" for r in seen
        )

    @pytest.mark.asyncio
    async def test_stops_reading_after_first_row(self, tool_identity):
        """El body es infinito: solo termina si se corta tras la primera fila."""
        stream = _EndlessCsv()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, stream=stream)

        extractor = _extractor(tool_identity, handler)

        row = await extractor.get_header_row(_URL, timeout_ms=5_000)

        assert row == ["a", "b", "c"]
        assert stream.closed is True
        assert stream.rows_sent <= 1

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self, tool_identity):
        def handler(request: httpx.Request) -> httpx.Response:
            name = request.url.path.rsplit("/", 1)[-1].removesuffix(".csv")
            return httpx.Response(200, content=f"{name}_a,{name}_b\n".encode())

        extractor = _extractor(tool_identity, handler)

        rows = await asyncio.gather(
            extractor.get_header_row("https://x.test/one.csv"),
            extractor.get_header_row("https://x.test/two.csv"),
        )

        assert rows == [["one_a", "one_b"], ["two_a", "two_b"]]


# ---------------------------------------------------------------------------
# Errores
# ---------------------------------------------------------------------------


class TestHeaderExtractionErrors:
    """Tests para el mapeo de fallas a errores tipados."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 500])
    async def test_http_error_status(self, tool_identity, status):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status, content=b"nope")

        extractor = _extractor(tool_identity, handler)

        with pytest.raises(FetchError) as exc_info:
            await extractor.get_header_row(_URL)

        assert exc_info.value.status_code == status
        assert str(status) in str(exc_info.value)
        assert exc_info.value.url == _URL
        assert len(calls) == 1  # sin retry

    @pytest.mark.asyncio
    async def test_connect_error_is_network_error(self, tool_identity):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        extractor = _extractor(tool_identity, handler)

        with pytest.raises(NetworkError) as exc_info:
            await extractor.get_header_row(_URL)

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_transport_timeout_is_timeout_error(self, tool_identity):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        extractor = _extractor(tool_identity, handler)

        with pytest.raises(FetchTimeoutError) as exc_info:
            await extractor.get_header_row(_URL, timeout_ms=1_000)

        assert isinstance(exc_info.value.original_error, httpx.ReadTimeout)

    @pytest.mark.asyncio
    async def test_timeout_is_builtin_timeout_error(self, tool_identity):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(10)
            return httpx.Response(200, content=b"late,header\n")

        extractor = _extractor(tool_identity, handler)

        with pytest.raises(TimeoutError) as exc_info:
            await extractor.get_header_row(_URL, timeout_ms=20)

        assert isinstance(exc_info.value, FetchTimeoutError)
        assert isinstance(exc_info.value, HeaderExtractionError)

    @pytest.mark.asyncio
    async def test_slow_server_times_out_and_cancels_request(self, tool_identity):
        cancelled = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return httpx.Response(200, content=b"late,header\n")

        extractor = _extractor(tool_identity, handler)

        with pytest.raises(FetchTimeoutError) as exc_info:
            await extractor.get_header_row(_URL, timeout_ms=50)

        assert exc_info.value.timeout_ms == 50
        assert "50ms" in str(exc_info.value)
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_invalid_bytes_is_parse_error(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b"\xff\xfe\xfaabc,def\n"))

        with pytest.raises(ParseError) as exc_info:
            await extractor.get_header_row(_URL)

        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_malformed_quoting_is_parse_error(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b'"a"b,c\n1,2'))

        with pytest.raises(ParseError):
            await extractor.get_header_row(_URL)

    @pytest.mark.asyncio
    async def test_row_larger_than_limit_is_parse_error(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b"a" * 100), max_header_bytes=16)

        with pytest.raises(ParseError, match="16 bytes"):
            await extractor.get_header_row(_URL)

    @pytest.mark.asyncio
    async def test_all_failures_share_base_class(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b"", status=503))

        with pytest.raises(HeaderExtractionError):
            await extractor.get_header_row(_URL)


class TestHeaderExtractorConfig:
    """Tests para validación de parámetros."""

    def test_rejects_non_positive_default_timeout(self, tool_identity):
        with pytest.raises(ConfigError):
            CsvHeaderExtractor(tool_identity, default_timeout_ms=0)

    def test_rejects_non_positive_max_bytes(self, tool_identity):
        with pytest.raises(ConfigError):
            CsvHeaderExtractor(tool_identity, max_header_bytes=0)

    @pytest.mark.asyncio
    async def test_rejects_non_positive_call_timeout(self, tool_identity):
        extractor = _extractor(tool_identity, _body(b"a,b\n"))

        with pytest.raises(ConfigError):
            await extractor.get_header_row(_URL, timeout_ms=-5)

    def test_identity_is_exposed(self, tool_identity):
        extractor = CsvHeaderExtractor(tool_identity)
        assert extractor.identity.user_agent == "csv-semantic-indexer/9.9.9-test"
