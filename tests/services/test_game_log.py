# tests/services/test_game_log.py
import datetime
import itertools

import pytest

from chess_tracker.exceptions import GameNotFoundError, MissingFieldError
from chess_tracker.services.game_log import GameLog
from chess_tracker.types import (Color, GamePhase, GameResult, PositionalCategory, PositionalType,
                                 TacticalCategory, TacticType, TimeControl)


@pytest.fixture
def log():
    ids = itertools.count(1)
    return GameLog(id_factory=lambda: f"id{next(ids)}")


def _add(log, **overrides):
    fields = dict(
        date=datetime.date(2024, 3, 1), color=Color.WHITE, opponent_rating=1450,
        result=GameResult.WIN, opening="Queen's Gambit", time_control=TimeControl.RAPID,
    )
    fields.update(overrides)
    return log.add_game(**fields)


def test_add_game_starts_with_no_mistakes(log):
    game = _add(log, opening="  Queen's Gambit ")

    assert game.id == "id1"
    assert game.mistakes == ()
    assert game.opening == "Queen's Gambit"
    assert log.games == (game,)


@pytest.mark.parametrize("overrides, field", [
    ({"opening": ""}, "opening"),
    ({"opening": "   "}, "opening"),
    ({"opponent_rating": None}, "opponent_rating"),
])
def test_add_game_requires_opening_and_rating(log, overrides, field):
    with pytest.raises(MissingFieldError) as exc_info:
        _add(log, **overrides)

    assert exc_info.value.field_name == field
    assert log.games == ()


def test_add_mistake_appends_in_order_without_touching_the_old_snapshot(log):
    # Arrange
    game = _add(log)
    before = log.games

    # Act
    first = log.add_mistake(game.id, TacticalCategory(TacticType.SKEWER), time_pressure=True)
    second = log.add_mistake(game.id, PositionalCategory(PositionalType.OPEN_FILE), GamePhase.ENDGAME)

    # Assert
    assert log.get_game(game.id).mistakes == (first, second)
    assert before[0].mistakes == ()


def test_edit_game_keeps_id_and_mistakes(log):
    game = _add(log)
    mistake = log.add_mistake(game.id, TacticalCategory(TacticType.FORK))

    edited = log.edit_game(game.id, result=GameResult.DRAW, opening="Slav Defense")

    assert edited.id == game.id
    assert edited.result == GameResult.DRAW
    assert edited.opening == "Slav Defense"
    assert edited.mistakes == (mistake,)
    assert log.games == (edited,)


def test_edit_game_trims_the_opening_like_add_game(log):
    game = _add(log)

    edited = log.edit_game(game.id, opening="  Italian Game ")

    assert edited.opening == "Italian Game"


def test_edit_game_rejects_non_editable_fields(log):
    game = _add(log)
    with pytest.raises(TypeError):
        log.edit_game(game.id, mistakes=())


def test_edit_game_cannot_blank_the_opening(log):
    game = _add(log)
    with pytest.raises(MissingFieldError):
        log.edit_game(game.id, opening="")
    assert log.get_game(game.id).opening == "Queen's Gambit"


def test_delete_game_removes_its_mistakes(log):
    # Arrange
    kept = _add(log)
    doomed = _add(log, opening="Budapest Gambit")
    log.add_mistake(doomed.id, TacticalCategory(TacticType.PIN))

    # Act
    removed = log.delete_game(doomed.id)

    # Assert
    assert removed.mistake_count == 1
    assert log.games == (kept,)
    assert all(m.id != removed.mistakes[0].id for g in log.games for m in g.mistakes)


def test_unknown_game_id_raises(log):
    with pytest.raises(GameNotFoundError):
        log.delete_game("missing")
    with pytest.raises(GameNotFoundError):
        log.add_mistake("missing", TacticalCategory(TacticType.FORK))
