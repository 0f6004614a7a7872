"""Tests for persisted history, scroll offsets and preferences."""

import json

import pytest

from kitab_tui.data import Coordinate, SearchMode
from kitab_tui.history import (
    HistoryEntry,
    HistoryStore,
    JsonFileStore,
    MemoryStore,
    Preferences,
    StoreError,
)


def verse_entry(chapter=1, **kwargs):
    return HistoryEntry(
        kind="verse",
        title=f"Genesis {chapter}",
        coordinate=Coordinate("A", "Genesis", chapter),
        **kwargs,
    )


class TestHistoryEntry:
    """Test HistoryEntry serialization."""

    def test_to_dict_roundtrip(self):
        """to_dict -> from_dict should preserve all fields."""
        entry = HistoryEntry(
            kind="verse",
            title="سفر 2",
            tab_id="verse-1",
            timestamp=100.0,
            coordinate=Coordinate("العهد", "سفر", 2),
            highlighted_verse=3,
            search_query="نور",
            search_mode=SearchMode.EXACT,
        )
        assert HistoryEntry.from_dict(entry.to_dict()) == entry

    def test_from_dict_defaults(self):
        """Missing optional keys get defaults."""
        entry = HistoryEntry.from_dict({"kind": "search-results", "search_query": "x"})
        assert entry.coordinate is None
        assert entry.search_mode is SearchMode.PARTIAL
        assert entry.tab_id == ""

    def test_unknown_mode_falls_back(self):
        entry = HistoryEntry.from_dict({"kind": "verse", "search_mode": "fuzzy"})
        assert entry.search_mode is SearchMode.PARTIAL

    def test_json_serializable(self):
        """Entries survive a JSON round trip."""
        entry = verse_entry(timestamp=5.0)
        assert HistoryEntry.from_dict(json.loads(json.dumps(entry.to_dict()))) == entry


class TestPreferences:
    """Test Preferences validation."""

    def test_defaults(self):
        prefs = Preferences()
        assert prefs.verse_size == 18
        assert prefs.title_size == 24
        assert prefs.content_margin == 2.0
        assert prefs.verse_number_inside is False
        assert prefs.combined_verse_view is False

    def test_roundtrip(self):
        prefs = Preferences(20, 30, 0.0, True, True)
        assert Preferences.from_dict(prefs.to_dict()) == prefs

    @pytest.mark.parametrize("data", [
        {"verse_size": 0},
        {"verse_size": -4},
        {"verse_size": "big"},
        {"verse_size": True},
        {"title_size": None},
    ])
    def test_invalid_sizes(self, data):
        """Sizes must be positive numbers."""
        prefs = Preferences.from_dict(data)
        assert prefs.verse_size == 18
        assert prefs.title_size == 24

    def test_zero_margin_allowed(self):
        """Margin may be zero but not negative."""
        assert Preferences.from_dict({"content_margin": 0}).content_margin == 0.0
        assert Preferences.from_dict({"content_margin": -1}).content_margin == 2.0

    def test_non_bool_toggle(self):
        assert Preferences.from_dict({"verse_number_inside": "yes"}).verse_number_inside is False

    def test_not_a_dict(self):
        assert Preferences.from_dict(["x"]) == Preferences()

    @pytest.mark.parametrize("size", [0.5, 0.99, float("inf"), float("nan")])
    def test_fractional_or_unbounded_size(self, size):
        """Sizes that do not round to a positive int fall back."""
        assert Preferences.from_dict({"verse_size": size}).verse_size == 18

    def test_fractional_size_truncated(self):
        assert Preferences.from_dict({"verse_size": 20.7}).verse_size == 20

    def test_nan_margin(self):
        assert Preferences.from_dict({"content_margin": float("nan")}).content_margin == 2.0


class TestHistoryStore:
    """Test the history log and last-tab pointer."""

    def test_append_and_read(self, store):
        store.append_history(verse_entry(1))
        store.append_history(verse_entry(2))
        assert [e.coordinate.chapter for e in store.history()] == [1, 2]

    def test_last_opened_tab(self, store):
        """last_tab tracks the latest append."""
        assert store.get_last_opened_tab() is None
        store.append_history(verse_entry(1))
        store.append_history(verse_entry(2, tab_id="t2"))
        last = store.get_last_opened_tab()
        assert last.coordinate.chapter == 2
        assert last.tab_id == "t2"

    def test_retention(self):
        """Only the newest entries are kept."""
        store = HistoryStore(MemoryStore(), max_entries=3)
        for chapter in range(1, 6):
            store.append_history(verse_entry(chapter))
        assert [e.coordinate.chapter for e in store.history()] == [3, 4, 5]

    def test_malformed_entries_skipped(self):
        backend = MemoryStore({"history": [
            {"kind": "verse", "coordinate": {"testament": "A", "book": "B", "chapter": 1}},
            {"title": "no kind"},
            "garbage",
            {"kind": "verse", "coordinate": {"testament": "A"}},
        ]})
        assert len(HistoryStore(backend).history()) == 1

    def test_history_not_a_list(self):
        assert HistoryStore(MemoryStore({"history": {"a": 1}})).history() == []

    def test_clear(self, store):
        store.append_history(verse_entry(1))
        store.clear_history()
        assert store.history() == []


class TestScrollStore:
    """Test persisted scroll offsets."""

    def test_set_get(self, store):
        store.set_scroll_position("t1", 12)
        assert store.get_scroll_position("t1") == 12.0
        assert store.get_scroll_position("t2") == 0.0
        assert store.get_scroll_position("t2", default=3.0) == 3.0

    def test_negative_clamped(self, store):
        store.set_scroll_position("t1", -3)
        assert store.get_scroll_position("t1") == 0.0

    def test_remove(self, store):
        store.set_scroll_position("t1", 1)
        store.set_scroll_position("t2", 2)
        store.remove_scroll_position("t1")
        assert store.get_scroll_positions() == {"t2": 2.0}

    def test_invalid_offsets_dropped(self):
        backend = MemoryStore({"scroll_positions": {"a": 1, "b": "x", "c": -2, "d": True}})
        assert HistoryStore(backend).get_scroll_positions() == {"a": 1.0}


class TestThemeStore:
    def test_dark_mode(self, store):
        assert store.get_dark_mode() is False
        store.set_dark_mode(True)
        assert store.get_dark_mode() is True

    def test_dark_mode_bad_value(self):
        assert HistoryStore(MemoryStore({"dark_mode": "on"})).get_dark_mode() is False


class TestJsonFileStore:
    """Test the JSON file backend."""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "state" / "state.json"
        first = HistoryStore(JsonFileStore(path))
        first.append_history(verse_entry(2))
        first.set_preferences(Preferences(verse_size=26))
        first.set_dark_mode(True)

        second = HistoryStore(JsonFileStore(path))
        assert second.get_last_opened_tab().coordinate.chapter == 2
        assert second.get_preferences().verse_size == 26
        assert second.get_dark_mode() is True

    def test_arabic_written_unescaped(self, tmp_path):
        path = tmp_path / "state.json"
        JsonFileStore(path).set("title", "سفر")
        assert "سفر" in path.read_text(encoding="utf-8")

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "none.json").get("x", 5) == 5

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonFileStore(path).get("x")

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonFileStore(path).get("x")

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path / "state.json")
        store.set("a", 1)
        store.delete("a")
        assert store.get("a") is None


class TestDegradation:
    """Persistence failures fall back to defaults."""

    def test_corrupt_file_gives_defaults(self, tmp_path):
        """A corrupt state file reads as defaults and is replaced on write."""
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        store = HistoryStore(JsonFileStore(path))
        assert store.history() == []
        assert store.get_preferences() == Preferences()
        store.set_dark_mode(True)
        assert json.loads(path.read_text(encoding="utf-8")) == {"dark_mode": True}

    def test_write_failure_is_swallowed(self):
        class ReadOnly(MemoryStore):
            def set(self, key, value):
                raise StoreError("read-only")

        store = HistoryStore(ReadOnly())
        store.append_history(verse_entry(1))
        store.set_scroll_position("t", 4)
        assert store.history() == []
        assert store.get_scroll_positions() == {}

    def test_non_string_query_dropped(self):
        """A stored query that is not text reads as no query."""
        entry = HistoryEntry.from_dict({"kind": "search-results", "title": "x", "search_query": 42})
        assert entry.search_query is None

    def test_corrupt_last_tab_query(self):
        """A last tab with a bad query still loads."""
        store = HistoryStore(MemoryStore({
            "last_tab": {"kind": "search-results", "title": "x", "search_query": ["a"]},
        }))
        assert store.get_last_opened_tab().search_query is None


class TestScrollPruning:
    """Offsets of tabs that did not survive a restart are dropped."""

    def test_retain(self):
        backend = MemoryStore({"scroll_positions": {"a": 1, "b": 2, "c": 3}})
        store = HistoryStore(backend)
        assert store.retain_scroll_positions(["b", "z"]) == {"b": 2.0}
        assert backend.get("scroll_positions") == {"b": 2.0}

    def test_retain_nothing_to_drop(self, store):
        store.set_scroll_position("a", 1)
        assert store.retain_scroll_positions(["a"]) == {"a": 1.0}
