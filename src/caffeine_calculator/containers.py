"""Dependency container wiring for the application."""

from dataclasses import dataclass

from caffeine_calculator.adapters.json_file_storage import JsonFileStorage
from caffeine_calculator.config import Settings
from caffeine_calculator.services.history import HistoryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    history_service: HistoryService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    storage = JsonFileStorage(resolved_settings.history_file)
    history_service = HistoryService(
        storage=storage, limit=resolved_settings.history_limit
    )
    return AppContainer(settings=resolved_settings, history_service=history_service)
