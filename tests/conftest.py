"""Pytest configuration and shared fixtures for the summary pipeline tests."""

from __future__ import annotations

from typing import Any

import pytest

from src.config.settings import AFKThresholds
from tests.payloads import standard_match


@pytest.fixture
def thresholds() -> AFKThresholds:
    """Default AFK thresholds (10 min, 0.5 CS/min, 1500 damage, 4000 gold)."""
    return AFKThresholds()


@pytest.fixture
def standard_payload() -> dict[str, Any]:
    return standard_match()


@pytest.fixture
def viewer_name() -> str:
    return "Viewer#EUW"
