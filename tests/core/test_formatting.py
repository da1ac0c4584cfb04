# tests/core/test_formatting.py
import pytest

from chess_tracker.core.formatting import format_fixed, format_key, pluralize, round_half_up


@pytest.mark.parametrize("key, expected", [
    ("fork", "fork"),
    ("backRank", "back Rank"),
    ("removalOfDefender", "removal Of Defender"),
    ("removal_of_defender", "removal of defender"),
    ("", ""),
])
def test_format_key(key, expected):
    assert format_key(key) == expected


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(6.25, 1) == 6.3
    assert round_half_up(33.333333, 1) == 33.3


def test_format_fixed_pads_decimals():
    assert format_fixed(0, 2) == "0.00"
    assert format_fixed(1.5, 2) == "1.50"
    assert format_fixed(2.5, 0) == "3"


def test_pluralize():
    assert pluralize(1, "game") == "game"
    assert pluralize(0, "mistake") == "mistakes"
    assert pluralize(3, "time") == "times"
