"""
Name: Indexer Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide the static tool identity used to label outbound requests

Collaborators:
  - container.py: reads settings to build the chunker and header extractor
  - crosscutting/logger.py: reads log_level / log_json

Constraints:
  - No business logic, pure configuration

Notes:
  - Singleton via lru_cache, loaded once per process
  - Cross-field chunk validation raises ConfigError (same contract as TextChunker)
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__
from .exceptions import ConfigError


class Settings(BaseSettings):
    """
    Indexer settings loaded from environment variables.

    Attributes:
        chunk_size_limit: Max characters per chunk (default: 1000)
        chunk_overlap: Overlap between consecutive chunks (default: 100)
        chunk_boundary_aware: Prefer natural separators as chunk ends (default: False)
        header_fetch_timeout_ms: Deadline for fetching a CSV header (default: 120000)
        header_max_bytes: Max bytes buffered while looking for the first row (default: 1MiB)
        tool_name: Product name sent in the User-Agent header
        tool_version: Product version sent in the User-Agent header
        log_level: Logging level (default: INFO)
        log_json: Emit JSON logs (default: True)
    """

    # Chunking
    chunk_size_limit: int = 1000
    chunk_overlap: int = 100
    chunk_boundary_aware: bool = False

    # Header extraction
    header_fetch_timeout_ms: int = 120_000
    header_max_bytes: int = 1024 * 1024

    # Outbound identification (User-Agent)
    tool_name: str = "csv-semantic-indexer"
    tool_version: str = __version__

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("chunk_size_limit")
    @classmethod
    def chunk_size_limit_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk_size_limit must be greater than 0")
        return v

    @field_validator("chunk_overlap")
    @classmethod
    def chunk_overlap_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("chunk_overlap must be >= 0")
        return v

    @field_validator("header_fetch_timeout_ms", "header_max_bytes")
    @classmethod
    def header_limits_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("header limits must be greater than 0")
        return v

    @field_validator("tool_name", "tool_version")
    @classmethod
    def tool_identity_not_blank(cls, v: str) -> str:
        value = (v or "").strip()
        if not value:
            raise ValueError("tool_name/tool_version must not be blank")
        return value

    def validate_chunk_params(self) -> None:
        """
        Cross-field validation: overlap must be less than chunk_size_limit.
        Called explicitly after instantiation.
        """
        if self.chunk_overlap >= self.chunk_size_limit:
            raise ConfigError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size_limit ({self.chunk_size_limit})"
            )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
        ConfigError: If chunk_overlap >= chunk_size_limit
    """
    settings = Settings()
    settings.validate_chunk_params()
    return settings
