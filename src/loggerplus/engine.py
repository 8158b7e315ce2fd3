"""
LoggerPlus — the engine context.

One engine owns the settings, the tag registry, the two transformer
registries, the stack-trace provider and the native writers. Log calls
go through info(), warning() and error(), each running one Emission
against the matching writer.

Usage::

    engine = LoggerPlus()
    engine.settings.use_tags = True
    engine.tags.create_global("svc")

    @scoped
    def handle(request):
        engine.info("handling", request)

    engine.tags.create_local("debug", handle)
    handle({"id": 42})         # -> [svc][debug] handling {'id': 42}

A module-level engine is available through get_engine() for code that
does not want to pass one around.
"""

from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Sequence

from .config import resolve_config, DIAGNOSTIC_KEYS
from .diagnostics import init_diagnostics
from .output import Writer, native_error, native_log, native_warn
from .pipeline import Emission
from .registry import TagRegistry, TransformerRegistry
from .resolver import resolve
from .scope import call_chain
from .settings import Settings, normalize_option
from .templates import InspectStackProvider, StackTraceProvider


class LoggerPlus:
    """Engine context for scope-aware log enrichment.

    Args:
        settings: Initial settings (default: all features off)
        writer: Writer for info(); also used for warning()/error() when
            their own writers are not given
        warn_writer: Writer for warning() (default: stderr)
        error_writer: Writer for error() (default: stderr)
        provider: Stack-trace provider for microtemplates
        clock: Returns the instant used for date stamps
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        writer: Optional[Writer] = None,
        warn_writer: Optional[Writer] = None,
        error_writer: Optional[Writer] = None,
        provider: Optional[StackTraceProvider] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.tags = TagRegistry()
        self.text_transformers = TransformerRegistry('text transformers')
        self.object_transformers = TransformerRegistry('object transformers')
        self.provider = provider if provider is not None else InspectStackProvider()
        self.clock = clock or datetime.now

        # The unwrapped writers stay reachable for plain output
        self.native_log = writer or native_log
        self.native_warn = warn_writer or writer or native_warn
        self.native_error = error_writer or writer or native_error

    # -------------------------------------------------------------------------
    # Logging entry points
    # -------------------------------------------------------------------------
    def info(self, *args: Any) -> None:
        """Log args through the info writer."""
        self.emit_with(self.native_log, *args)

    log = info

    def warning(self, *args: Any) -> None:
        """Log args through the warn writer."""
        self.emit_with(self.native_warn, *args)

    warn = warning

    def error(self, *args: Any) -> None:
        """Log args through the error writer."""
        self.emit_with(self.native_error, *args)

    def emit_with(self, writer: Writer, *args: Any,
                  chain: Optional[Sequence[Any]] = None) -> Emission:
        """Run one emission against an arbitrary writer.

        Returns the finished Emission so callers can inspect what
        happened (states visited, whether anything was written).
        """
        emission = Emission(self, writer, args, chain=chain)
        emission.run()
        return emission

    # -------------------------------------------------------------------------
    # Resolution helpers
    # -------------------------------------------------------------------------
    def resolve_tags(self, chain: Optional[Sequence[Any]] = None) -> List[str]:
        """Tags that apply to a log call made now (or from chain)."""
        return resolve(chain if chain is not None else call_chain(), self.tags)

    def resolve_text_transformers(self, chain: Optional[Sequence[Any]] = None) -> list:
        return resolve(chain if chain is not None else call_chain(), self.text_transformers)

    def resolve_object_transformers(self, chain: Optional[Sequence[Any]] = None) -> list:
        return resolve(chain if chain is not None else call_chain(), self.object_transformers)

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------
    def reset(self) -> None:
        """Drop every tag and transformer and restore default settings."""
        self.settings = Settings()
        self.tags = TagRegistry()
        self.text_transformers = TransformerRegistry('text transformers')
        self.object_transformers = TransformerRegistry('object transformers')


# =============================================================================
# Module-level singleton
# =============================================================================

_engine: Optional[LoggerPlus] = None


def init_engine(overrides: Optional[Mapping[str, Any]] = None, *, start_dir=None,
                use_config_files: bool = True, **engine_kwargs: Any) -> LoggerPlus:
    """Initialize the module-level engine.

    Settings come from overrides, then .loggerplus.json, then
    ~/.loggerplus/config.json (see config.py). The 'verbosity' and
    'show' keys of the merged config initialize diagnostics.

    Args:
        overrides: Settings that win over config files
        start_dir: Where to start looking for .loggerplus.json
        use_config_files: False to ignore config files entirely
        **engine_kwargs: Passed to LoggerPlus (writers, provider, clock)

    Returns:
        The initialized engine
    """
    global _engine

    if use_config_files:
        resolved = resolve_config(overrides, start_dir)
    else:
        resolved = {normalize_option(key): value for key, value in (overrides or {}).items()}

    diag_options = {key: resolved.pop(key) for key in list(resolved) if key in DIAGNOSTIC_KEYS}
    if diag_options:
        init_diagnostics(verbosity=int(diag_options.get('verbosity', 0)),
                         channels=list(diag_options.get('show') or []))

    _engine = LoggerPlus(Settings.from_dict(resolved), **engine_kwargs)
    return _engine


def get_engine() -> LoggerPlus:
    """Get the module-level engine, creating a default one if needed."""
    global _engine
    if _engine is None:
        _engine = LoggerPlus()
    return _engine
