"""
Pytest configuration and shared fixtures for setup-inspequte tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from setup_inspequte.release.target import resolve_install_target
from tests.mocks import FakeToolCache

# Runner variables that would leak the outer CI environment into tests
RUNNER_ENV_VARS = (
    "GITHUB_OUTPUT",
    "GITHUB_PATH",
    "GITHUB_API_URL",
    "GITHUB_TOKEN",
    "RUNNER_TOOL_CACHE",
    "RUNNER_TEMP",
    "SETUP_INSPEQUTE_TIMEOUT",
    "INPUT_VERSION",
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that touch the real filesystem tool cache",
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch):
    """Remove GitHub runner variables so tests behave the same inside CI."""
    for name in RUNNER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from setup_inspequte.core import platform

    platform.clear_host_cache()
    yield
    platform.clear_host_cache()


@pytest.fixture
def fake_tool_cache() -> FakeToolCache:
    """In-memory tool cache recording every call."""
    return FakeToolCache()


@pytest.fixture
def linux_target():
    """Install target for linux/x64."""
    return resolve_install_target("linux", "x64")


@pytest.fixture
def windows_target():
    """Install target for win32/x64."""
    return resolve_install_target("win32", "x64")


@pytest.fixture
def runner_files(temp_dir: Path, monkeypatch):
    """Point GITHUB_OUTPUT and GITHUB_PATH at empty files in temp_dir."""
    output_file = temp_dir / "github_output"
    path_file = temp_dir / "github_path"
    output_file.touch()
    path_file.touch()
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    monkeypatch.setenv("GITHUB_PATH", str(path_file))
    return output_file, path_file
