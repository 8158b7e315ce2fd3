"""
diagnostics — verbosity-gated reporting on loggerplus internals.

Public API:
    DiagnosticOutput    — verbosity/channel gated writer
    init_diagnostics    — singleton initialization
    get_diagnostics     — access singleton
    ChannelConfig       — channel threshold override
    parse_channel_spec  — parse 'name[:level]'
    KNOWN_CHANNELS      — set of recognized channel names
    trace               — function tracing decorator
"""

from .manager import DiagnosticOutput, init_diagnostics, get_diagnostics
from .channels import (
    ChannelConfig, parse_channel_spec, KNOWN_CHANNELS,
    CHANNEL_DESCRIPTIONS, OPT_IN_CHANNELS, format_channel_list,
)
from .trace import trace

__all__ = [
    'DiagnosticOutput', 'init_diagnostics', 'get_diagnostics',
    'ChannelConfig', 'parse_channel_spec', 'KNOWN_CHANNELS',
    'CHANNEL_DESCRIPTIONS', 'OPT_IN_CHANNELS', 'format_channel_list',
    'trace',
]
