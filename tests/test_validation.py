"""Tests for raw input parsing."""

import numpy as np
import pytest

from utils.validation import parse_number


class TestParseNumber:
    """Test conversion of cell values to floats."""

    @pytest.mark.parametrize("value, expected", [
        (5, 5.0),
        (2.5, 2.5),
        (-1.25, -1.25),
        ("3.5", 3.5),
        ("  42 ", 42.0),
        ("-0.5", -0.5),
        (np.float64(1.5), 1.5),
        (np.int64(7), 7.0),
    ])
    def test_accepts_numbers(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "   ", "abc", "1,000", True, False,
        float("nan"), float("inf"), "-inf", "nan", [1], {"a": 1},
    ])
    def test_rejects_non_numbers(self, value):
        assert parse_number(value) is None

    def test_result_is_float(self):
        assert isinstance(parse_number(3), float)
