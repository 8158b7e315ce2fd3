"""loggerplus — scope-aware log enrichment.

Adds tags, date stamps, call-site microtemplates and text/object
transformations to plain output calls, chosen by where in the call
hierarchy each log call is made.

Public API:
    LoggerPlus          — engine context (settings, registries, writers)
    init_engine         — configure the module-level engine
    get_engine          — access the module-level engine
    info/warning/error  — log through the module-level engine
    Settings            — pipeline options
    Scope               — explicit scope handle
    scoped              — decorator running a function inside its scope
    enter_scope         — context manager pushing a scope
    identify            — scope id of a Scope or callable
    format_date         — run-length token date formatting
"""

from loggerplus._version import __version__, __app_name__
from loggerplus.dates import format_date
from loggerplus.engine import LoggerPlus, init_engine, get_engine
from loggerplus.errors import LoggerPlusError, NotFoundError, FormatError, TemplateError
from loggerplus.pipeline import Emission, PipelineState
from loggerplus.registry import TagRegistry, TransformerRegistry
from loggerplus.resolver import resolve
from loggerplus.scope import (
    Scope, identify, scope_for, enter_scope, scoped, call_chain, active_scopes,
)
from loggerplus.settings import Settings
from loggerplus.templates import Frame, InspectStackProvider


def info(*args):
    """Log through the module-level engine's info writer."""
    get_engine().info(*args)


log = info


def warning(*args):
    """Log through the module-level engine's warn writer."""
    get_engine().warning(*args)


warn = warning


def error(*args):
    """Log through the module-level engine's error writer."""
    get_engine().error(*args)


__all__ = [
    "__version__", "__app_name__",
    "LoggerPlus", "init_engine", "get_engine",
    "info", "log", "warning", "warn", "error",
    "Settings", "Emission", "PipelineState",
    "TagRegistry", "TransformerRegistry", "resolve",
    "Scope", "identify", "scope_for", "enter_scope", "scoped",
    "call_chain", "active_scopes",
    "Frame", "InspectStackProvider", "format_date",
    "LoggerPlusError", "NotFoundError", "FormatError", "TemplateError",
]
