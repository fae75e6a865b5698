"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add src to path (for 'sdrecorder.*' imports without an install)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from sdrecorder.core import logging as rec_logging  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep global verbosity, colors and sinks from leaking between tests."""
    yield
    rec_logging.set_verbosity(rec_logging.VerbosityLevel.NORMAL)
    rec_logging.set_colors(True)
    rec_logging._SINKS.clear()


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch, tmp_path):
    """Hide real user config and SDRECORDER_* variables from tests."""
    for key in [k for k in os.environ if k.startswith("SDRECORDER_")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def make_tree(tmp_path):
    """Build a source tree from relative paths.

    Paths ending in '/' become (possibly empty) directories; everything else
    becomes a file whose content is its own relative path.

    Returns:
        Callable taking a list of relative paths and returning the tree root
    """

    def _make(paths, root_name="src"):
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for rel in paths:
            if rel.endswith("/"):
                (root / rel).mkdir(parents=True, exist_ok=True)
                continue
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(rel.encode("utf-8"))
        return root

    return _make


@pytest.fixture
def captured_logs():
    """Collect plain log lines emitted through the recorder logger."""
    lines = []

    def _sink(level_name, plain):
        lines.append((level_name, plain))

    rec_logging.add_log_sink(_sink)
    yield lines
    rec_logging.remove_log_sink(_sink)
