"""Tests for JSON file storage."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shopsearch.config.errors import ErrorCode, PersistenceError

from .json_file import JsonFileStorage, MemoryStorage


@pytest.fixture
def storage(tmp_path: Path) -> JsonFileStorage:
    return JsonFileStorage(tmp_path / "state" / "storage.json")


def test_missing_file_reads_as_empty(storage: JsonFileStorage) -> None:
    assert storage.get_item("recentSearches") is None
    assert not storage.path.exists()


def test_set_get_remove(storage: JsonFileStorage) -> None:
    storage.set_item("recentSearches", '["shoes"]')
    storage.set_item("theme", "dark")

    assert storage.get_item("recentSearches") == '["shoes"]'
    assert json.loads(storage.path.read_text()) == {"recentSearches": '["shoes"]', "theme": "dark"}

    storage.remove_item("theme")
    assert storage.get_item("theme") is None
    assert storage.get_item("recentSearches") == '["shoes"]'


def test_values_survive_new_instance(storage: JsonFileStorage) -> None:
    storage.set_item("k", "v")
    assert JsonFileStorage(storage.path).get_item("k") == "v"


def test_corrupt_file_raises_read_error(storage: JsonFileStorage) -> None:
    storage.path.parent.mkdir(parents=True)
    storage.path.write_text("{not json")

    with pytest.raises(PersistenceError) as exc_info:
        storage.get_item("k")
    assert exc_info.value.code == ErrorCode.STORAGE_READ_FAILED


def test_unwritable_location_raises_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("")
    storage = JsonFileStorage(blocker / "storage.json")

    with pytest.raises(PersistenceError) as exc_info:
        storage.set_item("k", "v")
    assert exc_info.value.code == ErrorCode.STORAGE_WRITE_FAILED


def test_memory_storage() -> None:
    storage = MemoryStorage({"a": "1"})
    storage.set_item("b", "2")
    storage.remove_item("a")
    storage.remove_item("missing")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"
