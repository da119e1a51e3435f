"""Tests for the file-backed key-value storage."""

import json
from pathlib import Path

from caffeine_calculator.adapters.json_file_storage import JsonFileStorage
from caffeine_calculator.services.calculator import calculate_caffeine
from caffeine_calculator.services.history import HISTORY_STORAGE_KEY, HistoryService
from tests.conftest import make_input


def test_missing_file_reads_as_empty(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "absent.json")

    assert storage.get("anything") is None


def test_set_creates_parent_directories(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "storage.json"
    storage = JsonFileStorage(path)

    storage.set("greeting", "hello")

    assert json.loads(path.read_text(encoding="utf-8")) == {"greeting": "hello"}
    assert not path.with_name("storage.json.tmp").exists()


def test_keys_are_independent(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "storage.json")
    storage.set("a", "1")
    storage.set("b", "2")

    storage.remove("a")

    assert storage.get("a") is None
    assert storage.get("b") == "2"


def test_values_survive_a_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    JsonFileStorage(path).set("key", "value")

    assert JsonFileStorage(path).get("key") == "value"


def test_corrupt_file_is_discarded_on_write(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    storage = JsonFileStorage(path)

    assert storage.get("key") is None
    storage.set("key", "value")

    assert storage.get("key") == "value"


def test_history_service_persists_to_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    inputs = make_input()

    HistoryService(JsonFileStorage(path)).append(inputs, calculate_caffeine(inputs))
    entries = HistoryService(JsonFileStorage(path)).get_all()

    assert len(entries) == 1
    assert entries[0].inputs == inputs
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(stored[HISTORY_STORAGE_KEY], str)


def test_deeply_nested_file_is_treated_as_unreadable(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[" * 200_000, encoding="utf-8")

    assert JsonFileStorage(path).get(HISTORY_STORAGE_KEY) is None
    assert HistoryService(JsonFileStorage(path)).get_all() == []
