"""
Date formatting with run-length tokens.

A pattern is literal text containing runs of one of the token
characters below. The length of a run is the width of the field:

    Y  year        M  month (1-12)   D  day
    H  hour        m  minute         S  second
    s  millisecond

Each run is replaced by its field value right-aligned in exactly that
many characters: shorter values are padded with '0', longer values
keep only their rightmost digits ('YY' renders 2024 as '24').

    >>> format_date(datetime(2024, 3, 7, 9, 5, 2, 40000), "[YYYY-MM-DD, HH:mm:SS.sss]")
    '[2024-03-07, 09:05:02.040]'
"""

import re
from datetime import datetime

from .errors import FormatError


# A maximal run of a single token character
TOKEN_PATTERN = re.compile(r'([YMDHmSs])\1*')

DEFAULT_FORMAT = "[YYYY-MM-DD, HH:mm:SS.sss]"


def _field_value(instant: datetime, token: str) -> int:
    if token == 'Y':
        return instant.year
    if token == 'M':
        return instant.month
    if token == 'D':
        return instant.day
    if token == 'H':
        return instant.hour
    if token == 'm':
        return instant.minute
    if token == 'S':
        return instant.second
    if token == 's':
        return instant.microsecond // 1000
    raise FormatError(f"Error parsing date format - invalid identifier \"{token}\"")


def field_text(instant: datetime, run: str) -> str:
    """Render one token run at the run's width.

    Args:
        instant: The date/time to read the field from
        run: A run of one token character, e.g. 'YYYY' or 'sss'

    Returns:
        The field digits, exactly len(run) characters wide

    Raises:
        FormatError: If the run is empty or uses an unknown character
    """
    if not run:
        raise FormatError("Error parsing date format - empty token")
    digits = str(_field_value(instant, run[0]))
    width = len(run)
    return digits[-width:].rjust(width, '0')


def format_date(instant: datetime, pattern: str) -> str:
    """Substitute every token run in pattern with its field for instant.

    Runs are replaced left to right; literal text between them is kept
    as is. The result only depends on instant and pattern.
    """
    return TOKEN_PATTERN.sub(lambda m: field_text(instant, m.group(0)), pattern)
