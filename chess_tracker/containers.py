# chess_tracker/containers.py
"""
Defines the Dependency Injection (DI) container for the application.

This module uses the `punq` library to wire the configuration and the record
store that the command-line host needs. The insight engine is a set of pure
functions and needs no wiring.
"""

import punq

from chess_tracker.config.settings import RecordStoreSettings, Settings
from chess_tracker.services.record_store import RecordStore
from chess_tracker.types import RecordRepository


def get_container(settings: Settings) -> punq.Container:
    """
    Initializes and returns a DI container configured for one CLI invocation.
    """
    container = punq.Container()

    container.register(Settings, instance=settings)
    container.register(RecordStoreSettings, instance=settings.store)

    # A fresh, unconnected store per resolve; callers enter it as a context manager.
    container.register(RecordRepository, factory=lambda: RecordStore(settings.store))

    return container
