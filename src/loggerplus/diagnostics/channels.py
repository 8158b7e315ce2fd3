"""
Diagnostic channels.

Channels are named categories of diagnostic output. Each channel can
pin its own threshold, overriding the global verbosity.

Channel spec syntax:
    CHANNEL[:LEVEL]

    Examples:
        pipeline        # level 0
        template:2      # level 2
        registry:-4     # silenced
"""

from dataclasses import dataclass


KNOWN_CHANNELS = {
    'registry',     # Tag/transformer create, delete, clear
    'resolve',      # Call-chain resolution results
    'pipeline',     # Emission state transitions
    'template',     # Stack-trace provider round trips
    'config',       # Config file discovery and loading
    'error',        # Errors swallowed by the pipeline
    'trace',        # Function tracing (@trace decorator)
    'general',      # Default channel
}

CHANNEL_DESCRIPTIONS = {
    'registry': 'Tag and transformer registry changes',
    'resolve':  'Tags and transformers resolved per log call',
    'pipeline': 'Emission pipeline state transitions',
    'template': 'Stack-trace provider round trips',
    'config':   'Configuration loading and resolution',
    'error':    'Errors swallowed by the emission pipeline',
    'trace':    'Function call tracing',
    'general':  'General output',
}

# Off unless explicitly enabled via a channel spec
OPT_IN_CHANNELS = {
    'trace',
}


@dataclass
class ChannelConfig:
    """Threshold override for a single diagnostic channel."""
    name: str
    level: int = 0


def parse_channel_spec(spec: str) -> ChannelConfig:
    """Parse 'name' or 'name:level' into a ChannelConfig.

    Raises:
        ValueError: If the name is empty or the level is not an integer
    """
    name, _, level = spec.partition(':')
    name = name.strip()
    if not name:
        raise ValueError(f"Channel spec has no channel name: {spec!r}")
    if not level.strip():
        return ChannelConfig(name=name)
    return ChannelConfig(name=name, level=int(level))


def format_channel_list() -> str:
    """Format the known channels with descriptions for display."""
    lines = ["Available channels:"]
    max_name = max(len(name) for name in KNOWN_CHANNELS)
    for name in sorted(KNOWN_CHANNELS):
        desc = CHANNEL_DESCRIPTIONS.get(name, '')
        opt_in = " (opt-in)" if name in OPT_IN_CHANNELS else ""
        lines.append(f"  {name:<{max_name}}  {desc}{opt_in}")
    return "\n".join(lines)
