"""
Version information for loggerplus.

MAJOR.MINOR.PATCH[-PHASE] is the canonical form; get_pip_version()
maps it to PEP 440 for setup.py.
"""

MAJOR = 0
MINOR = 1
PATCH = 0
PHASE = "alpha"  # None, "alpha", "beta", "rc1", ...

__app_name__ = "loggerplus"


def get_version():
    """Return MAJOR.MINOR.PATCH[-PHASE]."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    if PHASE:
        base = f"{base}-{PHASE}"
    return base


def get_pip_version():
    """Return the PEP 440 form: 0.1.0-alpha -> 0.1.0a0, 0.1.0-rc1 -> 0.1.0rc1."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    phase_map = {"alpha": "a0", "beta": "b0"}
    if PHASE:
        base += phase_map.get(PHASE, PHASE)
    return base


__version__ = get_version()
PIP_VERSION = get_pip_version()
