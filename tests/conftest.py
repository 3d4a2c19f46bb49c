"""Shared pytest fixtures."""

from __future__ import annotations

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI invocations reconfigure structlog against a temporary stderr."""
    yield
    structlog.reset_defaults()
