"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from caffeine_calculator.config import Settings
from caffeine_calculator.containers import AppContainer
from caffeine_calculator.domain.caffeine import CaffeineInput, Tolerance, WeightUnit
from caffeine_calculator.services.history import HistoryService, KeyValueStorage


@dataclass
class InMemoryStorage(KeyValueStorage):
    """In-memory key-value storage for tests."""

    values: dict[str, str] = field(default_factory=dict)
    writes: int = 0

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


@dataclass
class UnavailableStorage(KeyValueStorage):
    """Storage whose every call fails, like a disabled local store."""

    def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")

    def remove(self, key: str) -> None:
        raise OSError("storage unavailable")


@dataclass
class SteppingClock:
    """Clock advancing by a fixed step on each call."""

    current: datetime = field(
        default_factory=lambda: datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
    )
    step: timedelta = timedelta(minutes=1)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


def make_input(**overrides: object) -> CaffeineInput:
    values: dict[str, object] = {
        "weight": 70,
        "weight_unit": WeightUnit.KG,
        "hours_awake": 16,
        "hours_to_survive": 8,
        "tolerance": Tolerance.MODERATE,
    }
    values.update(overrides)
    return CaffeineInput(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(history_file=tmp_path / "storage.json", history_limit=10)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def history_service(storage: InMemoryStorage, clock: SteppingClock) -> HistoryService:
    return HistoryService(storage=storage, clock=clock)


@pytest.fixture
def container(settings: Settings, history_service: HistoryService) -> AppContainer:
    return AppContainer(settings=settings, history_service=history_service)
