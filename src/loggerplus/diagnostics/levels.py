"""
Diagnostic verbosity levels.

loggerplus reports on its own behaviour (registry changes, pipeline
state transitions, template failures) through the diagnostics output.
A diagnostic message shows when:

    message.level <= threshold

where the threshold is a per-channel override or the global verbosity.

    ←── quieter ────────── default ────────── louder ──→
    -4    -3     -2     -1     0      1       2       3
    wall  errors warnings minimal default registry pipeline trace
"""

# Positive levels (opt-in detail)
TRACE = 3          # @trace entry/exit, per-argument transform detail
PIPELINE = 2       # Pipeline state transitions, resolution results
REGISTRY = 1       # Registry mutations, config files loaded
DEFAULT = 0

# Negative levels
MINIMAL = -1
WARNING = -2
ERROR = -3         # Template failures and other swallowed errors
NOTHING = -4       # Hard wall — no diagnostics at all
