"""
DiagnosticOutput — verbosity-gated reporting on loggerplus itself.

This is not the log output the library produces for its users (that
goes to the writers wrapped by the engine). It is where loggerplus
reports what it is doing: registry mutations, pipeline transitions,
and errors the pipeline swallows so a single log call never crashes
its caller.

The emit rule is: message shows when message.level <= threshold.
The threshold is either a per-channel override or the global verbosity.
At threshold -4 (hard wall) nothing is shown on that channel.
"""

import sys
from typing import Any, Dict, List, Optional, TextIO

from .channels import parse_channel_spec, OPT_IN_CHANNELS


class DiagnosticOutput:
    """Verbosity-gated diagnostic output with per-channel overrides.

    Output goes to ``file`` when given, otherwise to whatever
    ``sys.stderr`` is at the time of the write.

    Usage::

        diag = DiagnosticOutput(verbosity=2)
        diag.emit(2, "{state} -> {next}", channel='pipeline',
                  state='PREFIX', next='TRANSFORM')
        diag.error("template lookup failed")
    """

    def __init__(
        self,
        verbosity: int = 0,
        channel_overrides: Dict[str, int] = None,
        file: TextIO = None,
    ):
        self.verbosity = verbosity
        self.channel_overrides: Dict[str, int] = dict(channel_overrides or {})
        self._file = file

    @property
    def file(self) -> TextIO:
        return self._file if self._file is not None else sys.stderr

    def threshold(self, channel: str) -> int:
        """Effective threshold for a channel."""
        return self.channel_overrides.get(channel, self.verbosity)

    def emit(self, level: int, message: str, *,
             channel: str = 'general', **kwargs: Any) -> None:
        """Emit a message if level <= threshold for that channel.

        Args:
            level: Message level (higher = more verbose)
            message: Format string (uses str.format with kwargs)
            channel: Diagnostic channel name
            **kwargs: Values for template placeholders
        """
        threshold = self.threshold(channel)
        if threshold <= -4:
            return
        if level > threshold:
            return
        text = message.format(**kwargs) if kwargs else message
        print(f"[loggerplus:{channel}] {text}", file=self.file)

    def error(self, message: str, exc: Optional[BaseException] = None) -> None:
        """Report an error at level -3 on the 'error' channel.

        When exc is given, its type, message and chained cause are
        appended so the original failure is not lost.
        """
        if exc is not None:
            message = f"{message}: {type(exc).__name__}: {exc}"
            cause = exc.__cause__
            if cause is not None:
                message = f"{message} (caused by {type(cause).__name__}: {cause})"
        self.emit(-3, message, channel='error')

    def channel_active(self, channel: str, level: int = 0) -> bool:
        """Check whether a message at level would be shown on channel.

        Used to skip building expensive diagnostic text.
        """
        threshold = self.threshold(channel)
        return threshold > -4 and level <= threshold


# =============================================================================
# Module-level singleton
# =============================================================================

_diagnostics: Optional[DiagnosticOutput] = None


def init_diagnostics(verbosity: int = 0, channels: List[str] = None,
                     file: TextIO = None) -> DiagnosticOutput:
    """Initialize the module-level DiagnosticOutput singleton.

    Args:
        verbosity: Global threshold (0=default, positive=louder, negative=quieter)
        channels: Channel spec strings (e.g., ['pipeline:2', 'trace'])
        file: Destination stream; None follows sys.stderr

    Returns:
        The initialized DiagnosticOutput instance
    """
    global _diagnostics

    # Opt-in channels stay off unless a spec enables them
    channel_overrides = {ch: -1 for ch in OPT_IN_CHANNELS}

    for spec in channels or []:
        cfg = parse_channel_spec(spec)
        channel_overrides[cfg.name] = cfg.level

    _diagnostics = DiagnosticOutput(
        verbosity=verbosity,
        channel_overrides=channel_overrides,
        file=file,
    )
    return _diagnostics


def get_diagnostics() -> DiagnosticOutput:
    """Get the module-level DiagnosticOutput, creating a default if needed."""
    global _diagnostics
    if _diagnostics is None:
        _diagnostics = init_diagnostics()
    return _diagnostics
