# tests/conftest.py

"""Shared pytest fixtures for the capture test suite."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from product_capture.config.settings import Settings


@pytest.fixture(autouse=True)
def blank_credentials() -> Generator[None, None, None]:
    """Ignore keys loaded from a local .env; tests opt in explicitly."""
    with (
        patch.object(Settings, "SCRAPER_API_KEY", ""),
        patch.object(Settings, "EXCHANGE_API_KEY", ""),
    ):
        yield
