"""Pytest configuration and shared fixtures for pipechain tests.

This module provides:
- Custom markers
- Environment isolation between tests
- Small step and listener helpers
"""

import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

# Add project root to Python path to allow imports without installing
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers",
        "integration: mark test as an integration test (multiple pipes composed)"
    )
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (may take several seconds)"
    )


# ==================== Environment Fixtures ====================

@pytest.fixture(scope="function", autouse=True)
def isolate_environment():
    """Restore environment variables after every test."""
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_env_vars(monkeypatch) -> Dict[str, str]:
    """Provide settings-related environment variables for testing."""
    env_vars = {
        "LOG_LEVEL": "ERROR",  # Suppress logs during tests
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    monkeypatch.delenv("PIPECHAIN_CONFIG", raising=False)
    return env_vars


# ==================== Step Helpers ====================

@pytest.fixture
def recorder() -> List[Any]:
    """List that steps and listeners append to."""
    return []


@pytest.fixture
def delayed_listener(recorder) -> Callable[[float, Any], Callable]:
    """Build an async listener that sleeps then records a marker."""

    def build(delay: float, marker: Any):
        async def listener(value):
            await asyncio.sleep(delay)
            recorder.append(marker)

        return listener

    return build
