"""Tests for the style preference store and its storage backends."""

import json

import pytest

from backend.preference_storage import (
    JsonPreferenceStorage, MemoryPreferenceStorage, PreferenceStorageError
)
from backend.style_preferences import STYLE_PREFERENCE_KEY
from backend.styles import CalendarStyle


class FailingWriteStorage(MemoryPreferenceStorage):
    def write(self, key, value):
        raise PreferenceStorageError("disk full")


class FailingReadStorage(MemoryPreferenceStorage):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def read(self, key):
        raise PreferenceStorageError("permission denied")

    def write(self, key, value):
        self.writes += 1
        super().write(key, value)


class TestLoad:
    def test_first_run_persists_default(self, make_store, memory_storage):
        store = make_store(memory_storage)
        assert store.style is CalendarStyle.GRID_MONTH
        assert store.wait_for_writes(5)
        assert memory_storage.read(STYLE_PREFERENCE_KEY) == "grid-month"

    @pytest.mark.parametrize("stored", ["", "not-a-style"])
    def test_empty_or_invalid_becomes_default(self, make_store, stored):
        storage = MemoryPreferenceStorage({STYLE_PREFERENCE_KEY: stored})
        store = make_store(storage)
        assert store.style is CalendarStyle.GRID_MONTH
        assert store.wait_for_writes(5)
        assert storage.read(STYLE_PREFERENCE_KEY) == "grid-month"

    def test_valid_value_loaded(self, make_store):
        store = make_store(MemoryPreferenceStorage({STYLE_PREFERENCE_KEY: "bento-box"}))
        assert store.style is CalendarStyle.BENTO_BOX

    def test_read_failure_uses_default_without_writing(self, make_store):
        storage = FailingReadStorage()
        errors = []
        store = make_store(storage, error_reporter=errors.append)
        assert store.style is CalendarStyle.GRID_MONTH
        assert store.wait_for_writes(5)
        assert storage.writes == 0
        assert len(errors) == 1


class TestSetStyle:
    def test_survives_restart(self, make_store, tmp_path):
        path = tmp_path / "state.json"
        store = make_store(JsonPreferenceStorage(path))
        store.set_style("family-notebook")
        assert store.wait_for_writes(5)

        restarted = make_store(JsonPreferenceStorage(path))
        assert restarted.style is CalendarStyle.FAMILY_NOTEBOOK

    def test_emits_only_on_change(self, make_store, memory_storage):
        store = make_store(memory_storage)
        received = []
        store.style_changed.connect(received.append)

        store.set_style("heatmap")
        store.set_style("heatmap")
        store.set_style(CalendarStyle.HEATMAP)

        assert received == ["heatmap"]
        assert store.style is CalendarStyle.HEATMAP

    def test_invalid_value_coerced_to_default(self, make_store):
        store = make_store(MemoryPreferenceStorage({STYLE_PREFERENCE_KEY: "timeline"}))
        assert store.set_style("does-not-exist") is CalendarStyle.GRID_MONTH
        assert store.style is CalendarStyle.GRID_MONTH

    def test_last_write_wins(self, make_store, memory_storage):
        store = make_store(memory_storage)
        for style in ("timeline", "agenda-list", "three-day", "bookshelf"):
            store.set_style(style)
        assert store.wait_for_writes(5)
        assert memory_storage.read(STYLE_PREFERENCE_KEY) == "bookshelf"

    def test_write_failure_keeps_memory_value(self, make_store):
        errors = []
        store = make_store(FailingWriteStorage(), error_reporter=errors.append)
        store.set_style("subway-map")
        assert store.wait_for_writes(5)
        assert store.style is CalendarStyle.SUBWAY_MAP
        assert errors
        assert "disk full" in errors[-1]

    def test_failed_write_survives_reconcile(self, make_store):
        storage = FailingWriteStorage({STYLE_PREFERENCE_KEY: "timeline"})
        errors = []
        store = make_store(storage, error_reporter=errors.append)
        received = []
        store.style_changed.connect(received.append)

        store.set_style("subway-map")
        assert store.wait_for_writes(5)

        assert store.reconcile() is False
        assert store.style is CalendarStyle.SUBWAY_MAP
        assert received == ["subway-map"]

    def test_external_change_after_failed_write(self, make_store):
        storage = FailingWriteStorage({STYLE_PREFERENCE_KEY: "timeline"})
        store = make_store(storage, error_reporter=lambda msg: None)
        store.set_style("subway-map")
        assert store.wait_for_writes(5)

        MemoryPreferenceStorage.write(storage, STYLE_PREFERENCE_KEY, "cube-3d")
        assert store.reconcile() is True
        assert store.style is CalendarStyle.CUBE_3D


class TestReconcile:
    def test_adopts_external_change(self, make_store, memory_storage):
        store = make_store(memory_storage)
        store.load()
        assert store.wait_for_writes(5)
        received = []
        store.style_changed.connect(received.append)

        memory_storage.write(STYLE_PREFERENCE_KEY, "cube-3d")

        assert store.reconcile() is True
        assert store.style is CalendarStyle.CUBE_3D
        assert received == ["cube-3d"]
        assert store.reconcile() is False

    def test_ignores_invalid_external_value(self, make_store):
        storage = MemoryPreferenceStorage({STYLE_PREFERENCE_KEY: "timeline"})
        store = make_store(storage)
        store.load()
        storage.write(STYLE_PREFERENCE_KEY, "bogus")
        assert store.reconcile() is False
        assert store.style is CalendarStyle.TIMELINE

    def test_reconcile_from_json_file(self, make_store, tmp_path):
        path = tmp_path / "state.json"
        store = make_store(JsonPreferenceStorage(path))
        store.load()
        assert store.wait_for_writes(5)

        path.write_text(json.dumps({STYLE_PREFERENCE_KEY: "ryokan-style"}))
        assert store.reconcile() is True
        assert store.style is CalendarStyle.RYOKAN_STYLE

    def test_watching_lifecycle(self, make_store, tmp_path):
        store = make_store(JsonPreferenceStorage(tmp_path / "state.json"), poll_interval_ms=50)
        store.load()
        store.start_watching()
        assert store.is_watching
        store.stop_watching()
        assert not store.is_watching


class TestJsonPreferenceStorage:
    def test_missing_file_reads_none(self, tmp_path):
        assert JsonPreferenceStorage(tmp_path / "state.json").read(STYLE_PREFERENCE_KEY) is None

    def test_preserves_other_keys(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"geometry": "abc", "other": {"nested": 1}}))
        storage = JsonPreferenceStorage(path)
        storage.write(STYLE_PREFERENCE_KEY, "timeline")

        data = json.loads(path.read_text())
        assert data == {"geometry": "abc", "other": {"nested": 1}, STYLE_PREFERENCE_KEY: "timeline"}

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "state.json"
        JsonPreferenceStorage(path).write(STYLE_PREFERENCE_KEY, "heatmap")
        assert json.loads(path.read_text())[STYLE_PREFERENCE_KEY] == "heatmap"

    def test_corrupt_file_raises_on_read(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        with pytest.raises(PreferenceStorageError):
            JsonPreferenceStorage(path).read(STYLE_PREFERENCE_KEY)

    def test_store_survives_corrupt_file(self, make_store, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2, 3]")
        errors = []
        store = make_store(JsonPreferenceStorage(path), error_reporter=errors.append)
        assert store.style is CalendarStyle.GRID_MONTH
        assert errors

    def test_write_keeps_unreadable_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text('{"geometry": "abc", ')
        with pytest.raises(PreferenceStorageError):
            JsonPreferenceStorage(path).write(STYLE_PREFERENCE_KEY, "timeline")
        assert path.read_text() == '{"geometry": "abc", '

    def test_style_change_with_unreadable_file(self, make_store, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        errors = []
        store = make_store(JsonPreferenceStorage(path), error_reporter=errors.append)
        store.set_style("timeline")
        assert store.wait_for_writes(5)
        assert store.style is CalendarStyle.TIMELINE
        assert path.read_text() == "{not json"
        assert len(errors) == 2
