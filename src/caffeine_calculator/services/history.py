"""Bounded calculation history kept in a key-value storage slot."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from caffeine_calculator.domain.caffeine import (
    CaffeineInput,
    CaffeineResult,
    Tolerance,
    WeightUnit,
)
from caffeine_calculator.domain.history import HistoryEntry, HistoryResult

HISTORY_STORAGE_KEY = "caffeineCalculationHistory"
DEFAULT_HISTORY_LIMIT = 10

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Durable string storage addressed by key."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Delete a key; absent keys are ignored."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class HistoryService:
    """Newest-first log of recent calculations.

    Reads fail soft: a missing key, an unreadable storage or a corrupt value
    all read as an empty history. Every mutation rewrites the whole list in a
    single write with no locking, so concurrent writers race and the last one
    wins.
    """

    storage: KeyValueStorage
    limit: int = DEFAULT_HISTORY_LIMIT
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_all(self) -> list[HistoryEntry]:
        """Return stored entries, newest first."""
        try:
            raw = self.storage.get(HISTORY_STORAGE_KEY)
        except OSError:
            _logger.warning("History storage unavailable", exc_info=True)
            return []
        if raw is None:
            return []
        entries = try_parse(raw)
        if entries is None:
            _logger.warning("Ignoring malformed history value")
            return []
        return entries

    def append(self, inputs: CaffeineInput, result: CaffeineResult) -> HistoryEntry:
        """Record a calculation at the head of the log and trim it."""
        history = self.get_all()
        now = self.clock()
        entry = HistoryEntry(
            id=_next_id(now, history),
            timestamp=now,
            inputs=inputs,
            result=HistoryResult(
                total_mg=result.total_mg,
                breakdown=result.breakdown,
                safety_warning=result.safety_warning,
            ),
        )
        trimmed = [entry, *history][: self.limit]
        self._write(trimmed)
        return entry

    def delete_one(self, entry_id: int) -> None:
        """Remove the entry with the given id, if present."""
        history = self.get_all()
        remaining = [entry for entry in history if entry.id != entry_id]
        if len(remaining) == len(history):
            return
        self._write(remaining)

    def clear_all(self) -> None:
        """Drop the whole history."""
        try:
            self.storage.remove(HISTORY_STORAGE_KEY)
        except OSError:
            _logger.warning("Failed to clear history", exc_info=True)

    def _write(self, entries: list[HistoryEntry]) -> None:
        payload = json.dumps([entry_to_payload(entry) for entry in entries])
        try:
            self.storage.set(HISTORY_STORAGE_KEY, payload)
        except OSError:
            _logger.warning("Failed to write history", exc_info=True)


def try_parse(raw: str) -> list[HistoryEntry] | None:
    """Decode a stored history value, returning None when it is malformed."""
    try:
        payload = json.loads(raw)
        if not isinstance(payload, list):
            return None
        return [_parse_entry(item) for item in payload]
    except (
        ValueError,
        KeyError,
        TypeError,
        AttributeError,
        OverflowError,
        RecursionError,
    ):
        return None


def entry_to_payload(entry: HistoryEntry) -> dict[str, object]:
    """Serialize an entry to its stored JSON shape."""
    result: dict[str, object] = {
        "totalMg": entry.result.total_mg,
        "breakdown": entry.result.breakdown,
    }
    if entry.result.safety_warning is not None:
        result["safetyWarning"] = entry.result.safety_warning
    return {
        "id": entry.id,
        "timestamp": format_timestamp(entry.timestamp),
        "inputs": {
            "weight": entry.inputs.weight,
            "weightUnit": entry.inputs.weight_unit.value,
            "hoursAwake": entry.inputs.hours_awake,
            "hoursToSurvive": entry.inputs.hours_to_survive,
            "tolerance": entry.inputs.tolerance.value,
        },
        "result": result,
    }


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a Z suffix."""
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _parse_entry(item: dict[str, object]) -> HistoryEntry:
    inputs = item["inputs"]
    result = item["result"]
    timestamp = datetime.fromisoformat(str(item["timestamp"]))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    warning = result.get("safetyWarning")
    return HistoryEntry(
        id=int(item["id"]),
        timestamp=timestamp,
        inputs=CaffeineInput(
            weight=float(inputs["weight"]),
            weight_unit=WeightUnit(inputs["weightUnit"]),
            hours_awake=float(inputs["hoursAwake"]),
            hours_to_survive=float(inputs["hoursToSurvive"]),
            tolerance=Tolerance(inputs["tolerance"]),
        ),
        result=HistoryResult(
            total_mg=int(result["totalMg"]),
            breakdown=str(result["breakdown"]),
            safety_warning=str(warning) if warning is not None else None,
        ),
    )


def _next_id(now: datetime, history: list[HistoryEntry]) -> int:
    """Millisecond timestamp, bumped past existing ids on collision."""
    candidate = int(now.timestamp() * 1000)
    if history:
        candidate = max(candidate, max(entry.id for entry in history) + 1)
    return candidate
