# chess_tracker/core/aggregators.py
"""
Provides pure functions for the collection-wide statistics of a game log.

Every function takes a snapshot of games and returns a freshly computed
value. None of them fail on an empty collection; each returns its defined
default (zero or an empty list) instead.
"""

from collections import Counter
from typing import Dict, List, Sequence, Tuple

from chess_tracker.core.formatting import round_half_up
from chess_tracker.types import Game, GameResult, OpeningPerformance

MAX_RANKED_CATEGORIES = 5
UNKNOWN_OPENING = "Unknown"


def total_mistakes(games: Sequence[Game]) -> int:
    """Counts every mistake logged across all games."""
    return sum(game.mistake_count for game in games)


def average_mistakes_per_game(games: Sequence[Game]) -> float:
    """Returns the mean number of mistakes per game, or 0.0 for no games."""
    if not games:
        return 0.0
    return total_mistakes(games) / len(games)


def win_rate(games: Sequence[Game]) -> float:
    """
    Calculates the percentage of games won.

    Args:
        games: The snapshot of logged games.

    Returns:
        The win percentage rounded to one decimal place, or 0 for no games.
    """
    if not games:
        return 0.0
    wins = sum(1 for game in games if game.result == GameResult.WIN)
    return round_half_up(100 * wins / len(games), 1)


def tactic_ranking(games: Sequence[Game]) -> List[Tuple[str, int]]:
    """
    Ranks the most frequent mistake categories across all games.

    Both tactical and positional mistakes are tallied by their category key.
    `Counter.most_common` sorts stably, so categories with equal counts keep
    the order in which they were first encountered.

    Args:
        games: The snapshot of logged games.

    Returns:
        Up to five `(category_key, count)` pairs, most frequent first.
    """
    counts: Counter[str] = Counter(
        mistake.category.key for game in games for mistake in game.mistakes
    )
    return counts.most_common(MAX_RANKED_CATEGORIES)


def opening_table(games: Sequence[Game]) -> List[OpeningPerformance]:
    """
    Builds the per-opening performance table.

    Games with an empty opening label are grouped under "Unknown". Rows are
    ordered by games played, most first; ties keep the order in which the
    openings first appear in the collection.

    Args:
        games: The snapshot of logged games.

    Returns:
        A list of `OpeningPerformance` rows with integer win percentages.
    """
    groups: Dict[str, List[int]] = {}  # opening -> [wins, total]
    for game in games:
        tally = groups.setdefault(game.opening or UNKNOWN_OPENING, [0, 0])
        tally[1] += 1
        if game.result == GameResult.WIN:
            tally[0] += 1

    rows = [
        OpeningPerformance(
            opening=opening,
            win_rate_percent=int(round_half_up(100 * wins / total)),
            game_count=total,
        )
        for opening, (wins, total) in groups.items()
    ]
    return sorted(rows, key=lambda row: row.game_count, reverse=True)


def category_share(count: int, total: int) -> float:
    """Returns a category's share of all mistakes as a percentage (0-100)."""
    return 100 * count / (total or 1)
