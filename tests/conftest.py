"""Shared test fixtures for smell-sentinel tests."""

import os
import textwrap
from pathlib import Path

import pytest

from smell_sentinel.config import ENV_PREFIX
from smell_sentinel.detectors import DetectorContext
from smell_sentinel.scanning import SourceModelBuilder

JAVA_FIXTURES = Path(__file__).parent / "fixtures" / "java"


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(scope="session")
def builder():
    """One builder for the whole session; it is thread-safe."""
    return SourceModelBuilder()


@pytest.fixture
def build_unit(builder):
    """Build a SourceUnit from an indented Java snippet."""

    def _build(source: str, path: str = "Example.java"):
        return builder.build(textwrap.dedent(source), path)

    return _build


@pytest.fixture
def context():
    """Detector context with default settings."""
    return DetectorContext()


@pytest.fixture
def java_fixtures():
    """Directory of sample Java sources."""
    return JAVA_FIXTURES


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no global/project config files and no SMELL_SENTINEL_* variables."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    return project


@pytest.fixture
def write_java(tmp_path):
    """Write a dedented Java source file under tmp_path and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write
