"""
===============================================================================
MÓDULO: Logger estructurado (JSON)
===============================================================================

Objetivo
--------
Loguear de forma:
- Parseable (JSON), para que el host semántico lo agregue a sus logs
- Segura (redacción de secretos, URLs sin query string)
- Con bajo overhead

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear logs como JSON
  - Copiar los campos `extra` del LogRecord al payload
  - Redactar campos sensibles y limitar tamaños

Colaboradores:
  - crosscutting/config.py (nivel y formato)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit, urlunsplit

# Campos internos del LogRecord que NO queremos copiar como "extra".
_INTERNAL_LOGRECORD_KEYS: set[str] = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
}


def _strip_query(url: str) -> str:
    """Quita query string y fragmento (URLs firmadas suelen llevar tokens ahí)."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<url>"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class _Redactor:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      _Redactor

    Responsabilidades:
      - Redactar claves sensibles
      - Sacar query strings de campos `url`
      - Recortar strings gigantes (ej: un header CSV patológico)

    Colaboradores:
      - JSONFormatter
    ----------------------------------------------------------------------------
    """

    SENSITIVE_KEYS = {
        "password",
        "secret",
        "token",
        "authorization",
        "api_key",
        "apikey",
        "x-api-key",
        "access_token",
        "cookie",
    }

    URL_KEYS = {"url", "final_url", "redirect_url"}

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTADO***"

        if depth > self._max_depth:
            return "***TRUNCADO***"

        if isinstance(value, str):
            if key and key.lower() in self.URL_KEYS:
                value = _strip_query(value)
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "…(truncado)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> una línea JSON (con stacktrace si hay excepción)."""

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        # Extra fields: todo lo que venga en record.__dict__ que no sea interno
        for k, v in record.__dict__.items():
            if k in _INTERNAL_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(name: str = "csv-semantic-indexer") -> logging.Logger:
    """
    Crea y configura el logger del paquete.

    - Evita duplicación de handlers en reimport
    - Respeta log_level / log_json desde Settings cuando son válidos
    """
    from pydantic import ValidationError

    from .config import get_settings
    from .exceptions import ConfigError

    level = "INFO"
    use_json = True

    # Settings inválidos se reportan al construir componentes, no al importar.
    try:
        settings = get_settings()
        level = (settings.log_level or "INFO").upper()
        use_json = settings.log_json
    except (ValidationError, ConfigError):
        pass

    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


# Instancia global (import-friendly)
logger = setup_logger()
