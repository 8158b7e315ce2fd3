"""Exception types raised by loggerplus.

Registry mutations raise synchronously to the caller of the mutating
operation. Date formatting raises before anything reaches a writer.
Template failures are caught by the emission pipeline and reported on
the diagnostics ``error`` channel instead of reaching the log caller.
"""


class LoggerPlusError(Exception):
    """Base class for all loggerplus errors."""


class NotFoundError(LoggerPlusError, LookupError):
    """A tag, transformer, or scope-keyed list does not exist."""


class FormatError(LoggerPlusError, ValueError):
    """A date pattern contains a token outside Y M D H m S s."""


class TemplateError(LoggerPlusError):
    """Call-site metadata could not be obtained for microtemplates.

    The underlying cause (timeout, provider exception, short stack) is
    chained via ``__cause__``.
    """
