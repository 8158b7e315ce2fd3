"""Tests for loggerplus._version — PEP 440 compliance and version parsing."""

import re

import loggerplus
from loggerplus._version import (
    MAJOR, MINOR, PATCH, PHASE,
    PIP_VERSION,
    __version__,
    get_pip_version,
    get_version,
)


def test_version_format():
    """Version should be MAJOR.MINOR.PATCH[-PHASE]."""
    version = get_version()
    assert re.match(r"^\d+\.\d+\.\d+(-\w+)?$", version), \
        f"Unexpected version format: {version}"


def test_version_matches_components():
    assert get_version().startswith(f"{MAJOR}.{MINOR}.{PATCH}")


def test_pip_version_pep440():
    """PIP version must be PEP 440 compliant (no hyphens, proper pre-release)."""
    pip_ver = get_pip_version()
    assert "-" not in pip_ver, \
        f"PEP 440 forbids hyphens in version: {pip_ver}"
    assert re.match(r"^\d+\.\d+\.\d+((a|b|rc)\d+)?$", pip_ver), \
        f"PIP version is not N.N.N[{{a|b|rc}}N]: {pip_ver}"


def test_pip_version_alpha_mapping():
    """Alpha phase should map to 'a0' in PEP 440."""
    if PHASE == "alpha":
        assert get_pip_version().endswith("a0")


def test_module_level_constants():
    assert __version__ == get_version()
    assert PIP_VERSION == get_pip_version()
    assert loggerplus.__version__ == __version__
