"""
===============================================================================
TARJETA CRC — application/column_discovery.py
===============================================================================

Caso de uso:
    Descubrir columnas de un CSV remoto en modo best-effort

Responsabilidades:
    - Llamar al extractor de headers.
    - Si falla (cualquier HeaderExtractionError), loguear y devolver [].

Colaboradores:
    - domain.services.HeaderExtractorService
    - crosscutting.logger

Notas:
    - El extractor propaga todos sus errores; la política de degradar a
      lista vacía vive acá, en el caller.
===============================================================================
"""

from __future__ import annotations

from ..crosscutting.exceptions import HeaderExtractionError
from ..crosscutting.logger import logger
from ..domain.entities import HeaderRow
from ..domain.services import HeaderExtractorService


async def discover_columns(
    extractor: HeaderExtractorService, url: str, *, timeout_ms: int | None = None
) -> HeaderRow:
    """Columnas del CSV en `url`, o [] si no se pudieron obtener."""
    if not url:
        return []

    try:
        return await extractor.get_header_row(url, timeout_ms)
    except HeaderExtractionError as exc:
        logger.warning(
            "Column discovery failed, continuing without columns",
            extra={"url": url, "error_code": exc.code, "error": exc.message},
        )
        return []
