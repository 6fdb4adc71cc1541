from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep the agora package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agora.app import create_app  # noqa: E402
from agora.core import config as core_config  # noqa: E402
from agora.core.config import Settings  # noqa: E402


@pytest.fixture()
def data_file(tmp_path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture()
def make_client(data_file):
    """Factory building a TestClient around a fresh data file for the given preset."""
    def _make(preset: str = "full", **overrides) -> TestClient:
        settings = Settings(data_file=str(data_file), preset=preset, **overrides)
        return TestClient(create_app(settings))

    return _make


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    core_config.get_settings.cache_clear()
    yield
    core_config.get_settings.cache_clear()


def set_config(client: TestClient, **values) -> None:
    """Change the config block of the client's data file."""
    with client.app.state.storage.transaction() as db:
        db["config"].update(values)
