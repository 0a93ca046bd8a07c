"""
Pytest configuration and fixtures for minall_runtime tests.
"""

import io
import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from minall_runtime import MinAllRuntime, RuntimeConfig


CORPUS_DIR = Path(__file__).resolve().parents[3] / "benchmarks" / "scripts"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests that run deep recursion or benchmarks (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def output():
    """Captured print stream."""
    return io.StringIO()


@pytest.fixture
def runtime(output):
    """Runtime whose print output goes to the `output` fixture."""
    return MinAllRuntime(RuntimeConfig(output=output))


@pytest.fixture
def run():
    """
    Execute source on a fresh runtime and return everything it printed.

    Keyword arguments are passed through to RuntimeConfig.
    """
    def _run(source, **options):
        stream = io.StringIO()
        MinAllRuntime(RuntimeConfig(output=stream, **options)).execute(source)
        return stream.getvalue()
    return _run


@pytest.fixture(scope="session")
def corpus_dir():
    """Directory holding the bundled .js scripts."""
    if not CORPUS_DIR.is_dir():
        pytest.skip("benchmarks/scripts not available")
    return CORPUS_DIR
