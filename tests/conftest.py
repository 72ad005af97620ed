from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    Runs automatically for all tests so log output goes to stderr at WARNING
    level and does not mix with stdout assertions.
    """
    from rulekit.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env(temp_dir: Path) -> Generator[None, None, None]:
    """Remove all RULEKIT_ environment variables and isolate HOME."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("RULEKIT_"):
            del os.environ[key]
    # Keep a developer's ~/.config/rulekit/config.yaml out of the tests
    os.environ["HOME"] = str(temp_dir / "home")
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_config_yaml() -> str:
    """Return sample rulekit.yaml content for testing."""
    return """
evaluation:
  raw_literal_args: false
  decimal_precision: 12

verbosity: info
"""
