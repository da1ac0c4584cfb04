# chess_tracker/services/game_log.py
"""
Provides the mutation layer that produces the snapshots the insight engine reads.

A `GameLog` holds the current collection as an immutable tuple. Every
mutation builds a new tuple rather than changing records in place, so a
snapshot handed to the insight engine or the record store is never altered
afterwards.
"""

import dataclasses
import datetime
import uuid
from typing import Callable, Iterable, Optional, Tuple

import structlog

from chess_tracker.exceptions import GameNotFoundError, MissingFieldError
from chess_tracker.types import (Color, Game, GamePhase, GameResult, Mistake, MistakeCategory,
                                 PhaseValue, TimeControl)

logger = structlog.get_logger(__name__)

# Fields a whole-record edit may replace. Ids and mistakes are never edited.
EDITABLE_FIELDS = frozenset({
    "date", "color", "opponent_rating", "result", "opening", "time_control", "game_link", "pgn",
})


def _new_id() -> str:
    return uuid.uuid4().hex


class GameLog:
    """An in-memory game collection with add, edit and delete operations."""

    def __init__(self, games: Iterable[Game] = (), id_factory: Callable[[], str] = _new_id):
        """
        Initializes the log from an existing collection.

        Args:
            games: The starting collection, typically loaded from the record store.
            id_factory: Produces unique ids for new games and mistakes.
        """
        self._games: Tuple[Game, ...] = tuple(games)
        self._new_id = id_factory

    @property
    def games(self) -> Tuple[Game, ...]:
        """The current immutable snapshot of the collection."""
        return self._games

    def get_game(self, game_id: str) -> Game:
        for game in self._games:
            if game.id == game_id:
                return game
        raise GameNotFoundError(game_id)

    def _replace_game(self, updated: Game) -> None:
        self._games = tuple(updated if game.id == updated.id else game for game in self._games)

    @staticmethod
    def _check_required(opening: str, opponent_rating: Optional[int]) -> None:
        if not opening or not opening.strip():
            raise MissingFieldError("opening")
        if opponent_rating is None:
            raise MissingFieldError("opponent_rating")

    def add_game(
        self,
        date: datetime.date,
        color: Color,
        opponent_rating: Optional[int],
        result: GameResult,
        opening: str,
        time_control: TimeControl,
        game_link: Optional[str] = None,
        pgn: Optional[str] = None,
    ) -> Game:
        """
        Appends a new game with no mistakes.

        Raises:
            MissingFieldError: If the opening or the opponent rating is missing.
        """
        self._check_required(opening, opponent_rating)
        game = Game(
            id=self._new_id(), date=date, color=color, opponent_rating=opponent_rating,
            result=result, opening=opening.strip(), time_control=time_control,
            game_link=game_link or None, pgn=pgn or None,
        )
        self._games = self._games + (game,)
        logger.info("Game added.", game_id=game.id, opening=game.opening, result=game.result.value)
        return game

    def edit_game(self, game_id: str, **changes) -> Game:
        """
        Replaces the editable fields of a game, keeping its id and mistakes.

        Raises:
            GameNotFoundError: If no game has the given id.
            MissingFieldError: If the edit blanks the opening or the opponent rating.
            TypeError: If a change names a field that cannot be edited.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot edit game field(s): {', '.join(sorted(unknown))}")
        if isinstance(changes.get("opening"), str):
            changes["opening"] = changes["opening"].strip()

        updated = dataclasses.replace(self.get_game(game_id), **changes)
        self._check_required(updated.opening, updated.opponent_rating)
        self._replace_game(updated)
        logger.info("Game edited.", game_id=game_id, fields=sorted(changes))
        return updated

    def delete_game(self, game_id: str) -> Game:
        """
        Removes a game together with all of its mistakes.

        Raises:
            GameNotFoundError: If no game has the given id.
        """
        removed = self.get_game(game_id)
        self._games = tuple(game for game in self._games if game.id != game_id)
        logger.info("Game deleted.", game_id=game_id, mistakes_removed=removed.mistake_count)
        return removed

    def add_mistake(
        self,
        game_id: str,
        category: MistakeCategory,
        game_phase: PhaseValue = GamePhase.MIDDLEGAME,
        time_pressure: bool = False,
        note: str = "",
    ) -> Mistake:
        """
        Appends a mistake to the end of a game's mistake sequence.

        Raises:
            GameNotFoundError: If no game has the given id.
        """
        game = self.get_game(game_id)
        mistake = Mistake(
            id=self._new_id(), category=category, game_phase=game_phase,
            time_pressure=time_pressure, note=note,
        )
        self._replace_game(dataclasses.replace(game, mistakes=game.mistakes + (mistake,)))
        logger.info("Mistake added.", game_id=game_id, category=category.key)
        return mistake
