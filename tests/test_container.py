# tests/test_container.py
from chess_tracker.config.settings import RecordStoreSettings, Settings
from chess_tracker.containers import get_container
from chess_tracker.services.record_store import RecordStore
from chess_tracker.types import RecordRepository


def test_settings_read_nested_values_from_environment(monkeypatch):
    monkeypatch.setenv("CHESS_TRACKER_STORE__DB_FILEPATH", "/tmp/elsewhere.db")
    monkeypatch.setenv("CHESS_TRACKER_DEFAULT_LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.store.db_filepath == "/tmp/elsewhere.db"
    assert settings.store.storage_key == "chess-games"
    assert settings.default_log_level == "DEBUG"


def test_container_resolves_a_record_store(tmp_path):
    settings = Settings(store=RecordStoreSettings(db_filepath=str(tmp_path / "x.db")))
    container = get_container(settings)

    store = container.resolve(RecordRepository)

    assert isinstance(store, RecordStore)
    assert isinstance(store, RecordRepository)
    assert container.resolve(Settings) is settings
