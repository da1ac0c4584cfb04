"""
Shared pytest fixtures for Chess Tracker tests.
"""

import datetime
import itertools

import pytest

from chess_tracker.config.settings import RecordStoreSettings
from chess_tracker.types import (Color, Game, GamePhase, GameResult, Mistake, PositionalCategory,
                                 PositionalType, TacticalCategory, TacticType, TimeControl)


@pytest.fixture
def make_mistake():
    """Factory for mistakes; pass `tactic=` or `positional=` to pick the category."""
    ids = itertools.count(1)

    def _make(tactic=None, positional=None, phase=GamePhase.MIDDLEGAME, time_pressure=False, note=""):
        if positional is not None:
            category = PositionalCategory(PositionalType(positional))
        else:
            category = TacticalCategory(TacticType(tactic or TacticType.FORK))
        return Mistake(id=f"m{next(ids)}", category=category, game_phase=phase,
                       time_pressure=time_pressure, note=note)
    return _make


@pytest.fixture
def make_game():
    """Factory for games with sensible defaults; dates default to consecutive days."""
    ids = itertools.count(1)
    start = datetime.date(2024, 1, 1)

    def _make(result=GameResult.WIN, opening="Italian Game", mistakes=(), date=None, **overrides):
        number = next(ids)
        fields = dict(
            id=f"g{number}",
            date=date or start + datetime.timedelta(days=number),
            color=Color.WHITE,
            opponent_rating=1500,
            result=result,
            opening=opening,
            time_control=TimeControl.RAPID,
            mistakes=tuple(mistakes),
        )
        fields.update(overrides)
        return Game(**fields)
    return _make


@pytest.fixture
def games_with_mistake_counts(make_game, make_mistake):
    """Builds date-ordered games carrying the given number of fork mistakes each."""
    def _make(counts):
        return [make_game(mistakes=[make_mistake() for _ in range(count)]) for count in counts]
    return _make


@pytest.fixture
def store_settings(tmp_path):
    return RecordStoreSettings(db_filepath=str(tmp_path / "records.db"))
