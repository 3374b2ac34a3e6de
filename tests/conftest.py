"""Pytest fixtures for screenplay tests.

Every test starts with freshly loaded config and no current actor.
Environment variables (e.g. SCREENPLAY_CONFIG) are loaded from .env if present.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from dotenv import load_dotenv

from screenplay.config import reset_config
from screenplay.core.context import reset_current_actor

load_dotenv()


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "feature(name): mark test as belonging to a feature. "
        "Usage: @pytest.mark.feature('verification')"
    )


@pytest.fixture(autouse=True)
def fresh_state() -> Iterator[None]:
    """Reset global config and the current actor around each test."""
    reset_config()
    reset_current_actor()
    yield
    reset_config()
    reset_current_actor()
