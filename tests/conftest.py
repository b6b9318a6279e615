# tests/conftest.py

"""Fixtures shared by the showroom test suite."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Skip the real backoff in InventoryClient retries."""
    with patch("time.sleep"):
        yield
