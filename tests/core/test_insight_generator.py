# tests/core/test_insight_generator.py
import pytest

from chess_tracker.core.insight_generator import (CLOSING_RECOMMENDATION, NO_GAMES_INSIGHT,
                                                  TACTIC_DRILLS, build_dashboard_summary,
                                                  generate_insights)
from chess_tracker.types import GamePhase, GameResult, TacticType


def _find(insights, prefix):
    return [statement for statement in insights if statement.startswith(prefix)]


def test_empty_collection_yields_single_no_games_statement():
    assert generate_insights([]) == [NO_GAMES_INSIGHT]


def test_single_clean_game_produces_the_fixed_statements(make_game):
    # Arrange
    games = [make_game(result=GameResult.WIN)]

    # Act
    insights = generate_insights(games)

    # Assert
    assert insights == [
        "You've logged 1 game with 0 total mistakes. Your win rate is 100.0%.",
        "Average mistakes per game: ~0.00.",
        "Play at least 10 more games to generate trend insights (we compare recent vs previous games).",
        CLOSING_RECOMMENDATION,
    ]


def test_full_statement_order(make_game, make_mistake):
    # Arrange
    games = [
        make_game(opening="French Defense", result=GameResult.LOSS, mistakes=[
            make_mistake(tactic="backRank", phase=GamePhase.ENDGAME, time_pressure=True),
            make_mistake(positional="pawnStructure", phase=GamePhase.ENDGAME),
        ]),
        make_game(opening="French Defense", result=GameResult.WIN, mistakes=[
            make_mistake(tactic="backRank", phase=GamePhase.MIDDLEGAME),
        ]),
    ]

    # Act
    insights = generate_insights(games)

    # Assert
    assert insights == [
        "You've logged 2 games with 3 total mistakes. Your win rate is 50.0%.",
        "Average mistakes per game: ~1.50.",
        "Top missed tactic: back Rank — 2 times. Drill back-rank mate pattern drills.",
        "Top positional weakness: pawn Structure — 1 time. Study typical plans and motifs.",
        "33% of mistakes happen under time pressure. Practice faster tactics and time "
        "management (e.g., 5×5 minute tactic sprints).",
        "Most mistakes occur in the endgame. Focus training there (endgame technique).",
        "Opening to watch: French Defense — 50% win rate over 2 games. Consider reviewing "
        "main lines and common traps.",
        "Play at least 10 more games to generate trend insights (we compare recent vs previous games).",
        CLOSING_RECOMMENDATION,
    ]


def test_top_tactic_ignores_positional_categories(make_game, make_mistake):
    games = [make_game(mistakes=[
        make_mistake(positional="kingSafety"), make_mistake(positional="kingSafety"),
        make_mistake(tactic="zwischenzug"),
    ])]

    insights = generate_insights(games)

    assert _find(insights, "Top missed tactic:") == [
        "Top missed tactic: zwischenzug — 1 time. Drill zwischenzug pattern recognition."
    ]


@pytest.mark.parametrize("tactic, drill", [
    ("fork", "fork puzzles and knight coordination drills"),
    ("pin", "pin & skewers practice"),
    ("xRay", "x-ray and battery tactics"),
    ("removalOfDefender", "mixed tactical puzzles around this motif"),
])
def test_drill_suggestion_per_tactic(make_game, make_mistake, tactic, drill):
    insights = generate_insights([make_game(mistakes=[make_mistake(tactic=tactic)])])

    (statement,) = _find(insights, "Top missed tactic:")
    assert statement.endswith(f"Drill {drill}.")


def test_every_tactic_has_a_drill():
    assert set(TACTIC_DRILLS) == set(TacticType)


def test_time_pressure_above_a_quarter_gets_the_stronger_statement(make_game, make_mistake):
    # Arrange: 4 of 10 mistakes under time pressure.
    mistakes = [make_mistake(time_pressure=index < 4) for index in range(10)]

    # Act
    insights = generate_insights([make_game(mistakes=mistakes)])

    # Assert
    assert _find(insights, "40% of mistakes") == [
        "40% of mistakes happen under time pressure. Practice faster tactics and time "
        "management (e.g., 5×5 minute tactic sprints)."
    ]


def test_time_pressure_at_or_below_a_quarter_is_stated_plainly(make_game, make_mistake):
    low = [make_mistake(time_pressure=index < 2) for index in range(10)]
    exact = [make_mistake(time_pressure=index < 1) for index in range(4)]

    assert "20% of mistakes happen under time pressure." in generate_insights([make_game(mistakes=low)])
    assert "25% of mistakes happen under time pressure." in generate_insights([make_game(mistakes=exact)])


def test_phase_ties_favour_the_earlier_phase(make_game, make_mistake):
    games = [make_game(mistakes=[
        make_mistake(phase=GamePhase.ENDGAME), make_mistake(phase=GamePhase.OPENING),
    ])]

    insights = generate_insights(games)

    assert _find(insights, "Most mistakes occur") == [
        "Most mistakes occur in the opening. Focus training there (targeted opening drills)."
    ]


def test_no_phase_statement_when_no_phase_is_recognised(make_game, make_mistake):
    insights = generate_insights([make_game(mistakes=[make_mistake(phase="unknown")])])

    assert _find(insights, "Most mistakes occur") == []


def test_single_game_opening_is_never_the_opening_to_watch(make_game):
    # Arrange
    games = [
        make_game(opening="King's Gambit", result=GameResult.LOSS),
        make_game(opening="Ruy Lopez", result=GameResult.WIN),
        make_game(opening="Ruy Lopez", result=GameResult.LOSS),
        make_game(opening="Ruy Lopez", result=GameResult.WIN),
    ]

    # Act
    insights = generate_insights(games)

    # Assert
    assert _find(insights, "Opening to watch:") == [
        "Opening to watch: Ruy Lopez — 67% win rate over 3 games. Consider reviewing main "
        "lines and common traps."
    ]


def test_no_opening_to_watch_without_two_games_in_any_opening(make_game):
    games = [make_game(opening="Scandinavian", result=GameResult.LOSS),
             make_game(opening="Caro-Kann", result=GameResult.WIN)]

    assert _find(generate_insights(games), "Opening to watch:") == []


def test_trend_statement_reports_direction_and_recent_average(games_with_mistake_counts):
    games = games_with_mistake_counts([4] * 10 + [2] * 10)

    insights = generate_insights(games)

    assert insights[-2] == (
        "Mistakes per game over the last 10 games decreased by 50% compared to the "
        "previous 10 games (last avg: 2.00 mistakes/game)."
    )
    assert insights[-1] == CLOSING_RECOMMENDATION


@pytest.mark.parametrize("counts, direction", [
    ([1] * 10 + [3] * 10, "increased by 200%"),
    ([2] * 20, "stayed about the same by 0%"),
])
def test_trend_direction(games_with_mistake_counts, counts, direction):
    insights = generate_insights(games_with_mistake_counts(counts))

    assert direction in insights[-2]


def test_trend_window_is_fixed_at_ten_games(games_with_mistake_counts):
    insights = generate_insights(games_with_mistake_counts([1] * 19))

    assert insights[-2].startswith("Play at least 10 more games")
    with pytest.raises(TypeError):
        generate_insights(games_with_mistake_counts([1] * 4), window_size=2)


def test_generation_is_idempotent(make_game, make_mistake):
    games = [make_game(mistakes=[make_mistake(tactic="pin", time_pressure=True)]),
             make_game(result=GameResult.DRAW)]

    assert generate_insights(games) == generate_insights(games)


def test_dashboard_summary_collects_kpis(make_game, make_mistake):
    games = [make_game(mistakes=[make_mistake(tactic="pin")]), make_game(result=GameResult.LOSS)]

    summary = build_dashboard_summary(games)

    assert summary.win_rate == 50.0
    assert summary.total_mistakes == 1
    assert summary.games_logged == 2
    assert summary.category_ranking == [("pin", 1)]
    assert summary.insights == generate_insights(games)
