# chess_tracker/services/record_codec.py
"""
Converts Game and Mistake records to and from JSON-compatible dictionaries.

The stored shape uses the camelCase field names of the game log's blob
format (`opponentRating`, `mistakeType`, `tacticType`, ...). A stored mistake
names its kind in `mistakeType` and its category in the matching
`tacticType` or `positionalType` field; the other category field, if
present, is ignored on decode and never written on encode.
"""

import datetime
from typing import Any, Dict, Mapping

from chess_tracker.exceptions import RecordCodecError
from chess_tracker.types import (Color, Game, GamePhase, GameResult, Mistake, MistakeCategory,
                                 MistakeType, PhaseValue, PositionalCategory, PositionalType,
                                 TacticalCategory, TacticType, TimeControl)


def _decode_phase(raw: Any) -> PhaseValue:
    """Keeps recognised phases as `GamePhase`; anything else stays a raw string."""
    try:
        return GamePhase(raw)
    except ValueError:
        return "" if raw is None else str(raw)


def _decode_category(data: Mapping[str, Any]) -> MistakeCategory:
    if data.get("mistakeType") == MistakeType.TACTICAL.value:
        return TacticalCategory(TacticType(data["tacticType"]))
    return PositionalCategory(PositionalType(data["positionalType"]))


def encode_mistake(mistake: Mistake) -> Dict[str, Any]:
    """Encodes a Mistake into its stored dictionary shape."""
    category = mistake.category
    payload: Dict[str, Any] = {"id": mistake.id, "mistakeType": category.mistake_type.value}
    if isinstance(category, TacticalCategory):
        payload["tacticType"] = category.tactic.value
    else:
        payload["positionalType"] = category.positional.value
    payload.update(
        gamePhase=mistake.game_phase.value if isinstance(mistake.game_phase, GamePhase) else mistake.game_phase,
        timePressure=mistake.time_pressure,
        note=mistake.note,
    )
    return payload


def decode_mistake(data: Mapping[str, Any]) -> Mistake:
    """
    Decodes a stored dictionary into a Mistake.

    Raises:
        RecordCodecError: If the id is missing or the category is not a known value.
    """
    try:
        return Mistake(
            id=str(data["id"]),
            category=_decode_category(data),
            game_phase=_decode_phase(data.get("gamePhase")),
            time_pressure=bool(data.get("timePressure", False)),
            note=data.get("note") or "",
        )
    except (KeyError, ValueError, TypeError) as e:
        raise RecordCodecError(f"Malformed mistake record: {e!r}") from e


def encode_game(game: Game) -> Dict[str, Any]:
    """Encodes a Game, including its mistakes in order, into its stored dictionary shape."""
    return {
        "id": game.id,
        "date": game.date.isoformat(),
        "color": game.color.value,
        "opponentRating": game.opponent_rating,
        "result": game.result.value,
        "opening": game.opening,
        "timeControl": game.time_control.value,
        "gameLink": game.game_link or "",
        "pgn": game.pgn or "",
        "mistakes": [encode_mistake(mistake) for mistake in game.mistakes],
    }


def decode_game(data: Mapping[str, Any]) -> Game:
    """
    Decodes a stored dictionary into a Game.

    The date may carry a time component; only the day is kept. Empty
    `gameLink` and `pgn` values decode to None.

    Raises:
        RecordCodecError: If a required field is missing or holds an unknown value,
                          or if any of the game's mistakes is malformed.
    """
    try:
        return Game(
            id=str(data["id"]),
            date=datetime.date.fromisoformat(str(data["date"])[:10]),
            color=Color(data["color"]),
            opponent_rating=int(data["opponentRating"]),
            result=GameResult(data["result"]),
            opening=data.get("opening") or "",
            time_control=TimeControl(data["timeControl"]),
            game_link=data.get("gameLink") or None,
            pgn=data.get("pgn") or None,
            mistakes=tuple(decode_mistake(m) for m in data.get("mistakes") or []),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise RecordCodecError(f"Malformed game record: {e!r}") from e
