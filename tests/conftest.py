"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a test installed."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
