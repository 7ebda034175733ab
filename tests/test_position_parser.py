"""Tests for turning OCR text into coordinate candidates."""

import pytest

from src.nwminimap.core.position_parser import Candidate, normalize_token, parse_position


class TestNormalizeToken:

    @pytest.mark.parametrize("token, expected", [
        ("8500", "8500"),
        ("8500.123", "8500"),
        ("8500.123,", "8500"),        # comma dropped once a period is present
        ("8500,4", "8500"),           # comma read as decimal separator
        ("8500, 4 ", "8500"),         # whitespace removed first
        ("123.4.5", "123"),           # truncated at the first period
        ("123..45", "123"),           # repeated periods collapse
        ("1234...", "1234"),          # trailing periods stripped
        ("12,345", ""),               # integer part "12" is too short
        ("12", ""),
        ("123456", ""),
        ("14260", "14260"),
        ("100", "100"),
    ])
    def test_normalization_table(self, token, expected):
        assert normalize_token(token) == expected

    def test_comma_thousands_separator_with_period(self):
        assert normalize_token("8,500.5") == "8500"


class TestParsePosition:

    def test_hud_format(self):
        assert parse_position("[8500.123, 6000.456, 120.000]") == Candidate(8500, 6000)

    def test_noisy_single_digit_fractions(self):
        assert parse_position("8500, 4 6000,2") == Candidate(8500, 6000)

    def test_space_separated_integers(self):
        assert parse_position("8500 6000") == Candidate(8500, 6000)

    def test_comma_for_period_confusion(self):
        assert parse_position("[9123,456, 4321,789, 50,000]") == Candidate(9123, 4321)

    def test_values_are_floats(self):
        candidate = parse_position("[8500.1, 6000.2]")
        assert isinstance(candidate.x, float)
        assert isinstance(candidate.y, float)

    @pytest.mark.parametrize("text", ["", "[]", "8500", "abc", "   ", "[8500.123]"])
    def test_fewer_than_two_tokens(self, text):
        assert parse_position(text) is None

    def test_rejected_component_discards_candidate(self):
        assert parse_position("[8500.123, 12.456]") is None
        assert parse_position("[123456.1, 6000.4]") is None
