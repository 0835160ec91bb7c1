import numpy as np
import pytest

from rentintel.parsing import clamp, parse_bedroom_count, parse_number, round_half_up


@pytest.mark.parametrize(
    "value,expected",
    [
        (1200, 1200.0),
        (1200.5, 1200.5),
        (np.int64(950), 950.0),
        ("$1,234", 1234.0),
        ("1,234.50", 1234.5),
        ("850 sq ft", 850.0),
        (None, None),
        ("", None),
        ("call for pricing", None),
        (float("nan"), None),
        (np.nan, None),
        (True, None),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


@pytest.mark.parametrize(
    "bedrooms,unit_type,expected",
    [
        (2, "Studio", 2),
        ("1", None, 1),
        (None, "Studio", 0),
        (None, "0BR", 0),
        (None, "1 Bed / 1 Bath", 1),
        (None, "2br", 2),
        (None, "3x2", 3),
        (None, "1.5 BR", 1),
        (None, "12br", 12),
        (None, "Penthouse", 0),
        (None, "", 0),
    ],
)
def test_parse_bedroom_count(bedrooms, unit_type, expected):
    assert parse_bedroom_count(bedrooms, unit_type) == expected


def test_round_half_up_matches_javascript_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(-2.5) == -2
    assert round_half_up(73.91, 1) == 73.9


def test_clamp():
    assert clamp(115) == 100
    assert clamp(-15) == 0
    assert clamp(42) == 42
