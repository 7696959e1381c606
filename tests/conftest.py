"""Shared test fixtures."""

from pathlib import Path

import pytest
from wikistage.config import Config, ServerConfig, WikiConfig


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Create an empty page data directory."""
    data = tmp_path / "data"
    data.mkdir()
    return data


@pytest.fixture
def test_config(data_dir: Path) -> Config:
    """Create a test configuration using bundled templates and tmp_path data."""
    return Config(
        server=ServerConfig(),
        wiki=WikiConfig(data_dir=data_dir),
    )
