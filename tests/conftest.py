"""Shared test fixtures for the loggerplus test suite."""

import io
import os
from concurrent.futures import Future
from datetime import datetime
from unittest.mock import patch

import pytest

from loggerplus import LoggerPlus
from loggerplus import engine as _engine_mod
from loggerplus.diagnostics import init_diagnostics
from loggerplus.diagnostics import manager as _diag_mod
from loggerplus.templates import Frame


# A fixed instant: 2024-03-07 09:05:02.040
FIXED_NOW = datetime(2024, 3, 7, 9, 5, 2, 40000)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: tests that wait on timeouts")


# ---------------------------------------------------------------------------
# Singletons
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_singletons():
    """Restore the module-level engine and diagnostics after each test."""
    old_engine = _engine_mod._engine
    old_diag = _diag_mod._diagnostics
    yield
    _engine_mod._engine = old_engine
    _diag_mod._diagnostics = old_diag


@pytest.fixture
def diag_buf():
    """Route diagnostics into a buffer at default verbosity."""
    buf = io.StringIO()
    init_diagnostics(verbosity=0, file=buf)
    return buf


# ---------------------------------------------------------------------------
# Writers, providers, engines
# ---------------------------------------------------------------------------
class RecordingWriter:
    """Native writer stand-in that records every call's values."""

    def __init__(self):
        self.calls = []

    def __call__(self, *values):
        self.calls.append(values)

    @property
    def last(self):
        return self.calls[-1]


class FixedFramesProvider:
    """Stack-trace provider answering with a fixed list of frames."""

    def __init__(self, frames):
        self.frames = frames
        self.captures = 0

    def capture_chain(self):
        self.captures += 1
        future = Future()
        future.set_result(list(self.frames))
        return future


CALL_SITE = Frame(
    function_name="handle_request",
    file_name="server.py",
    file_path="/srv/app/server.py",
    line_number=42,
    column_number=9,
)

ENTRY_FRAME = Frame(
    function_name="info",
    file_name="engine.py",
    file_path="/site-packages/loggerplus/engine.py",
    line_number=80,
)


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def provider():
    return FixedFramesProvider([ENTRY_FRAME, CALL_SITE])


@pytest.fixture
def engine(writer, provider):
    """An engine writing every level to one RecordingWriter at FIXED_NOW."""
    return LoggerPlus(writer=writer, provider=provider, clock=lambda: FIXED_NOW)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.loggerplus/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def call_site():
    return CALL_SITE


@pytest.fixture
def make_writer():
    """Factory for extra RecordingWriters."""
    return RecordingWriter


@pytest.fixture
def make_provider():
    """Factory for FixedFramesProviders."""
    return FixedFramesProvider
