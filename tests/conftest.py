"""Pytest configuration and fixtures for pip-follow tests."""

import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Make pip_follow importable without installing the package
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from pip_follow.matcher import WindowMatcher  # noqa: E402
from pip_follow.models import WindowDescriptor  # noqa: E402
from pip_follow.pattern import compile_pattern  # noqa: E402
from pip_follow.tracker import WindowTracker  # noqa: E402


@pytest.fixture
def pip_matcher() -> WindowMatcher:
    """Matcher for Firefox Picture-in-Picture windows."""
    return WindowMatcher(
        title_rule=compile_pattern("regex:^Picture-in-Picture$"),
        app_id_rule=compile_pattern("regex:firefox$"),
    )


@pytest.fixture
def tracker(pip_matcher) -> WindowTracker:
    """Idle tracker using the Picture-in-Picture matcher."""
    return WindowTracker(pip_matcher)


@pytest.fixture
def pip_window() -> WindowDescriptor:
    return WindowDescriptor(id=2, title="Picture-in-Picture", app_id="firefox")


@pytest.fixture
def browser_window() -> WindowDescriptor:
    return WindowDescriptor(id=3, title="YouTube - Mozilla Firefox", app_id="firefox")


@pytest.fixture
def socket_dir() -> Generator[Path, None, None]:
    """Short temporary directory for Unix sockets (sun_path is limited to 108 bytes)."""
    with tempfile.TemporaryDirectory(dir="/tmp") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without compositor sockets or user configuration."""
    monkeypatch.delenv("NIRI_SOCKET", raising=False)
    monkeypatch.delenv("SWAYSOCK", raising=False)
    monkeypatch.delenv("PIP_FOLLOW_LOG_LEVEL", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return monkeypatch
