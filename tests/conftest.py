"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (no .env)
  - Register markers
  - Provide reusable fixtures (tool identity, clean singletons)

Collaborators:
  - pytest / pytest-asyncio
  - csv_semantic_indexer.crosscutting.config
  - csv_semantic_indexer.container
"""

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from csv_semantic_indexer.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from csv_semantic_indexer import container  # noqa: E402
from csv_semantic_indexer.domain.entities import ToolIdentity  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture
def tool_identity() -> ToolIdentity:
    """R: Static identity used to label outbound requests in tests."""
    return ToolIdentity(name="csv-semantic-indexer", version="9.9.9-test")


@pytest.fixture
def clean_settings(monkeypatch):
    """R: Fresh Settings/container singletons; env changes stay inside the test."""
    app_config.get_settings.cache_clear()
    container.reset_container()
    yield monkeypatch
    app_config.get_settings.cache_clear()
    container.reset_container()
