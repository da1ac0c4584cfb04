"""
Centralized Prometheus metrics definitions for the Chess Tracker application.

This module uses the prometheus-client library to define all metrics the
application records. The insight engine is pure and never touches these;
they are incremented by the record store, the retry decorator and the CLI.
"""
from prometheus_client import Counter, Histogram

# A common prefix for all application-specific metrics.
PREFIX = "chess_tracker"

# --- Record Store Metrics ---

RECORD_STORE_OPERATIONS_TOTAL = Counter(
    f"{PREFIX}_record_store_operations_total",
    "Total number of record store loads and saves.",
    ["operation", "outcome"],  # operation="load" / "save"; outcome="ok" / "empty" / "corrupt" / "error"
)

RECORDS_SKIPPED_TOTAL = Counter(
    f"{PREFIX}_records_skipped_total",
    "Total number of stored game records skipped because they could not be decoded.",
)

DB_TRANSIENT_ERRORS_TOTAL = Counter(
    f"{PREFIX}_db_transient_errors_total",
    "Total number of transient database errors that triggered a retry.",
    ["db_type"],
)

# --- Insight Metrics ---

INSIGHT_GENERATIONS_TOTAL = Counter(
    f"{PREFIX}_insight_generations_total",
    "Total number of times insights were generated for a snapshot.",
)

SNAPSHOT_SIZE_GAMES = Histogram(
    f"{PREFIX}_snapshot_size_games",
    "Histogram of the number of games in the snapshots passed to the insight engine.",
    buckets=(0, 10, 50, 100, 500, 1000, 5000, float("inf")),
)
