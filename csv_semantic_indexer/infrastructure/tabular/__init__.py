"""Lectura de CSV remotos (solo la fila de headers)."""

from .first_row import CANDIDATE_DELIMITERS, FirstRowReader, detect_delimiter, parse_record
from .header_extractor import CsvHeaderExtractor

__all__ = [
    "CANDIDATE_DELIMITERS",
    "FirstRowReader",
    "detect_delimiter",
    "parse_record",
    "CsvHeaderExtractor",
]
