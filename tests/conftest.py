# tests/conftest.py

"""Shared pytest fixtures for all link-card tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_cookie_store(tmp_path: Path) -> Generator[None, None, None]:
    """Point the default credential store at a per-test temp file."""
    with patch.object(
        Settings, "COOKIE_STORE_PATH", tmp_path / "credentials.json"
    ):
        yield
