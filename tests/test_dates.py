"""Tests for loggerplus.dates — run-length token date formatting."""

from datetime import datetime

import pytest

from loggerplus.dates import DEFAULT_FORMAT, field_text, format_date
from loggerplus.errors import FormatError


class TestFormatDate:
    """format_date() substitutes token runs left to right."""

    def test_default_format(self, fixed_now):
        assert format_date(fixed_now, DEFAULT_FORMAT) == "[2024-03-07, 09:05:02.040]"

    def test_deterministic(self, fixed_now):
        """Same instant and pattern give the same string."""
        assert format_date(fixed_now, "YYYY/MM/DD HH") == format_date(fixed_now, "YYYY/MM/DD HH")

    def test_literal_text_kept(self, fixed_now):
        assert format_date(fixed_now, "at HH:mm on DD.MM") == "at 09:05 on 07.03"

    def test_short_year_keeps_rightmost_digits(self, fixed_now):
        assert format_date(fixed_now, "YY") == "24"

    def test_single_width_truncates(self, fixed_now):
        """'s' renders milliseconds 40 as its last digit."""
        assert format_date(fixed_now, "s") == "0"

    def test_wide_run_pads_with_zeros(self, fixed_now):
        assert format_date(fixed_now, "MMMM") == "0003"

    def test_adjacent_runs_of_different_tokens(self, fixed_now):
        """Runs of different characters are separate fields."""
        assert format_date(fixed_now, "HHmmSS") == "090502"

    def test_month_is_one_based(self):
        assert format_date(datetime(2024, 1, 1), "MM") == "01"
        assert format_date(datetime(2024, 12, 1), "MM") == "12"

    def test_repeated_identical_runs(self, fixed_now):
        """Later runs are found after earlier replacements."""
        assert format_date(fixed_now, "DD-DD-D") == "07-07-7"

    def test_no_tokens(self, fixed_now):
        assert format_date(fixed_now, "plain text!") == "plain text!"


class TestFieldText:
    """field_text() renders one run at exactly its width."""

    @pytest.mark.parametrize("run,expected", [
        ("Y", "4"),
        ("YYYY", "2024"),
        ("YYYYYY", "002024"),
        ("D", "7"),
        ("sss", "040"),
        ("ss", "40"),
    ])
    def test_width_and_padding(self, fixed_now, run, expected):
        text = field_text(fixed_now, run)
        assert text == expected
        assert len(text) == len(run)

    def test_unknown_token_raises(self, fixed_now):
        with pytest.raises(FormatError, match="invalid identifier"):
            field_text(fixed_now, "QQ")

    def test_empty_run_raises(self, fixed_now):
        with pytest.raises(FormatError):
            field_text(fixed_now, "")

    def test_format_error_is_value_error(self, fixed_now):
        with pytest.raises(ValueError):
            field_text(fixed_now, "x")
