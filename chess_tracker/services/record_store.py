# chess_tracker/services/record_store.py
"""
Provides a concrete implementation of the `RecordRepository` protocol using SQLite.

The whole game collection is stored as one JSON blob under a single key of
a small key-value table, so a save always replaces the previous snapshot
and a load always returns a complete one. Reading is forgiving: a missing
key, an undecodable blob or a malformed record never prevents the rest of
the log from loading.
"""

import json
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Type, TYPE_CHECKING

import aiosqlite
import structlog

from chess_tracker.exceptions import (RecordCodecError, RecordStoreConnectionError,
                                      RecordStoreReadError, RecordStoreWriteError)
from chess_tracker.services.record_codec import decode_game, encode_game
from chess_tracker.types import Game
from chess_tracker.utils import metrics
from chess_tracker.utils.retry import retry_with_backoff

if TYPE_CHECKING:
    from chess_tracker.config.settings import RecordStoreSettings

logger = structlog.get_logger(__name__)

# "database is locked" errors in SQLite under WAL mode are transient.
RETRYABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    aiosqlite.OperationalError,
)

CREATE_STORE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS record_store (
    storage_key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

class RecordStore:
    """
    A `RecordRepository` implementation using a local SQLite key-value table.

    This class is an async context manager, managing its own database connection
    lifecycle.
    """

    def __init__(self, settings: "RecordStoreSettings"):
        """
        Initializes the record store.

        Args:
            settings: The store configuration containing the database path and blob key.
        """
        self._db_path = Path(settings.db_filepath)
        self._storage_key = settings.storage_key
        self._timeout_s = settings.timeout_s
        self._connection: Optional[aiosqlite.Connection] = None

    async def __aenter__(self) -> "RecordStore":
        """Initializes the database connection and creates the schema on entering the context."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._db_path, timeout=self._timeout_s)
            await self._connection.execute("PRAGMA journal_mode=WAL;")
            await self._connection.execute(CREATE_STORE_TABLE_SQL)
            await self._connection.commit()
        except aiosqlite.Error as e:
            raise RecordStoreConnectionError(f"Failed to initialize record store: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Closes the database connection on exiting the context."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _ensure_connected(self) -> aiosqlite.Connection:
        """Internal helper to ensure the database connection is active."""
        if self._connection is None:
            raise RecordStoreConnectionError("Record store is not connected.")
        return self._connection

    @retry_with_backoff(exceptions_to_catch=RETRYABLE_EXCEPTIONS, db_type="records")
    async def _read_blob(self) -> Optional[str]:
        conn = self._ensure_connected()
        try:
            async with conn.execute(
                "SELECT value_json FROM record_store WHERE storage_key = ?", (self._storage_key,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.OperationalError:
            raise
        except aiosqlite.Error as e:
            raise RecordStoreReadError(f"Failed to read records: {e}") from e
        return row[0] if row else None

    async def load(self) -> List[Game]:
        """
        Loads the stored game collection.

        Returns:
            The stored games in their saved order. A missing key or a blob that
            is not a JSON array yields an empty list; records that cannot be
            decoded are skipped with a warning.

        Raises:
            RecordStoreConnectionError: If the store has not been entered.
            RecordStoreReadError: If the read fails, including a transient error
                that outlasted its retries.
        """
        try:
            raw = await self._read_blob()
        except aiosqlite.OperationalError as e:
            metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="load", outcome="error").inc()
            raise RecordStoreReadError(f"Failed to read records after retries: {e}") from e
        if raw is None:
            metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="load", outcome="empty").inc()
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored records are not valid JSON, starting empty.", error=str(e))
            metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="load", outcome="corrupt").inc()
            return []
        if not isinstance(payload, list):
            logger.warning("Stored records are not a list, starting empty.", payload_type=type(payload).__name__)
            metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="load", outcome="corrupt").inc()
            return []

        games: List[Game] = []
        for index, record in enumerate(payload):
            try:
                games.append(decode_game(record))
            except RecordCodecError as e:
                logger.warning("Skipping malformed game record.", index=index, error=str(e))
                metrics.RECORDS_SKIPPED_TOTAL.inc()

        metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="load", outcome="ok").inc()
        logger.debug("Loaded game records.", count=len(games), skipped=len(payload) - len(games))
        return games

    @retry_with_backoff(exceptions_to_catch=RETRYABLE_EXCEPTIONS, db_type="records")
    async def _write_blob(self, value_json: str) -> None:
        conn = self._ensure_connected()
        try:
            await conn.execute(
                "INSERT INTO record_store (storage_key, value_json) VALUES (?, ?) "
                "ON CONFLICT(storage_key) DO UPDATE SET value_json = excluded.value_json, "
                "updated_at = CURRENT_TIMESTAMP",
                (self._storage_key, value_json),
            )
            await conn.commit()
        except aiosqlite.OperationalError:
            await conn.rollback()
            raise
        except aiosqlite.Error as e:
            await conn.rollback()
            raise RecordStoreWriteError(f"Failed to store records: {e}") from e

    async def save(self, games: Sequence[Game]) -> bool:
        """
        Replaces the stored game collection with the given snapshot.

        Args:
            games: The full collection to store.

        Returns:
            True if the snapshot was written, False if the write failed. Failures
            are logged rather than raised so the caller keeps its in-memory state.
        """
        value_json = json.dumps([encode_game(game) for game in games])
        try:
            await self._write_blob(value_json)
        except (aiosqlite.Error, RecordStoreWriteError, RecordStoreConnectionError) as e:
            logger.error("Failed to save game records.", count=len(games), error=str(e))
            metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="save", outcome="error").inc()
            return False

        metrics.RECORD_STORE_OPERATIONS_TOTAL.labels(operation="save", outcome="ok").inc()
        logger.debug("Saved game records.", count=len(games))
        return True
