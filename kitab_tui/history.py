"""Persisted history, scroll offsets and display preferences.

All persistence goes through a small key-value backend. HistoryStore
never lets a backend failure escape: it logs and hands back defaults, so
the in-memory session keeps working when the state file is unreadable.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from kitab_tui.data.types import Coordinate, SearchMode

logger = logging.getLogger(__name__)

MAX_ENTRIES = 100

HISTORY_KEY = "history"
LAST_TAB_KEY = "last_tab"
SCROLL_KEY = "scroll_positions"
PREFERENCES_KEY = "preferences"
DARK_MODE_KEY = "dark_mode"


class StoreError(Exception):
    """Raised by a backend when state cannot be read or written."""


class KeyValueStore(Protocol):
    """Minimal get/set persistence backend."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-memory backend (tests, --no-persist)."""

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Backend keeping every key in one JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Any]:
        if self._data is not None:
            return self._data
        if not self._path.exists():
            self._data = {}
            return self._data
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"cannot read {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"{self._path} does not hold a JSON object")
        self._data = data
        return self._data

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreError(f"cannot write {self._path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = value
        self._save()

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save()

    def reset(self) -> None:
        """Forget a corrupt document so the next write starts fresh."""
        self._data = {}


@dataclass
class HistoryEntry:
    """A verse or search-results tab at the moment it was (re)opened."""

    kind: str  # TabKind value: "verse" or "search-results"
    title: str
    tab_id: str = ""
    timestamp: float = field(default_factory=time.time)
    coordinate: Optional[Coordinate] = None
    highlighted_verse: Optional[int] = None
    search_query: Optional[str] = None
    search_mode: SearchMode = SearchMode.PARTIAL

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind,
            "title": self.title,
            "tab_id": self.tab_id,
            "timestamp": self.timestamp,
            "coordinate": self.coordinate.to_dict() if self.coordinate else None,
            "highlighted_verse": self.highlighted_verse,
            "search_query": self.search_query,
            "search_mode": SearchMode(self.search_mode).value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        """Create from dictionary."""
        coordinate = data.get("coordinate")
        highlighted = data.get("highlighted_verse")
        query = data.get("search_query")
        return cls(
            kind=str(data["kind"]),
            title=str(data.get("title", "")),
            tab_id=str(data.get("tab_id", "")),
            timestamp=float(data.get("timestamp", 0.0)),
            coordinate=Coordinate.from_dict(coordinate) if coordinate else None,
            highlighted_verse=int(highlighted) if highlighted is not None else None,
            search_query=query if isinstance(query, str) else None,
            search_mode=SearchMode.parse(data.get("search_mode")),
        )


@dataclass
class Preferences:
    """Reader display settings."""

    verse_size: int = 18  # px
    title_size: int = 24  # px
    content_margin: float = 2.0  # rem
    verse_number_inside: bool = False
    combined_verse_view: bool = False

    def to_dict(self) -> dict:
        return {
            "verse_size": self.verse_size,
            "title_size": self.title_size,
            "content_margin": self.content_margin,
            "verse_number_inside": self.verse_number_inside,
            "combined_verse_view": self.combined_verse_view,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Preferences":
        """Deserialize, replacing invalid values with defaults."""
        defaults = cls()
        if not isinstance(data, dict):
            return defaults

        def positive(key: str, fallback: int) -> int:
            value = data.get(key, fallback)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return fallback
            try:
                value = int(value)
            except (OverflowError, ValueError):
                return fallback
            return value if value > 0 else fallback

        def flag(key: str, fallback: bool) -> bool:
            value = data.get(key, fallback)
            return value if isinstance(value, bool) else fallback

        margin = data.get("content_margin", defaults.content_margin)
        if isinstance(margin, bool) or not isinstance(margin, (int, float)) or not margin >= 0:
            margin = defaults.content_margin

        return cls(
            verse_size=positive("verse_size", defaults.verse_size),
            title_size=positive("title_size", defaults.title_size),
            content_margin=float(margin),
            verse_number_inside=flag("verse_number_inside", defaults.verse_number_inside),
            combined_verse_view=flag("combined_verse_view", defaults.combined_verse_view),
        )


class HistoryStore:
    """Best-effort persistence used by the session manager."""

    def __init__(self, backend: KeyValueStore, max_entries: int = MAX_ENTRIES) -> None:
        self._backend = backend
        self._max_entries = max_entries

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def _get(self, key: str, default: Any) -> Any:
        try:
            return self._backend.get(key, default)
        except (StoreError, OSError) as exc:
            logger.warning("Failed to read %s, using defaults: %s", key, exc)
            reset = getattr(self._backend, "reset", None)
            if reset is not None:
                reset()
            return default

    def _set(self, key: str, value: Any) -> bool:
        try:
            self._backend.set(key, value)
        except (StoreError, OSError) as exc:
            logger.warning("Failed to save %s: %s", key, exc)
            return False
        return True

    # -- history ---------------------------------------------------------

    def append_history(self, entry: HistoryEntry) -> None:
        """Append an entry and point last_tab at it."""
        raw = self._get(HISTORY_KEY, [])
        if not isinstance(raw, list):
            raw = []
        raw.append(entry.to_dict())
        if len(raw) > self._max_entries:
            raw = raw[-self._max_entries:]
        self._set(HISTORY_KEY, raw)
        self._set(LAST_TAB_KEY, entry.to_dict())

    def history(self) -> List[HistoryEntry]:
        """All readable entries, oldest first."""
        raw = self._get(HISTORY_KEY, [])
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            entry = _entry_or_none(item)
            if entry is not None:
                entries.append(entry)
        return entries

    def clear_history(self) -> None:
        self._set(HISTORY_KEY, [])

    def get_last_opened_tab(self) -> Optional[HistoryEntry]:
        return _entry_or_none(self._get(LAST_TAB_KEY, None))

    # -- scroll positions ------------------------------------------------

    def get_scroll_positions(self) -> Dict[str, float]:
        raw = self._get(SCROLL_KEY, {})
        if not isinstance(raw, dict):
            return {}
        positions = {}
        for tab_id, offset in raw.items():
            if isinstance(offset, (int, float)) and not isinstance(offset, bool) and offset >= 0:
                positions[str(tab_id)] = float(offset)
        return positions

    def get_scroll_position(self, tab_id: str, default: float = 0.0) -> float:
        return self.get_scroll_positions().get(tab_id, default)

    def set_scroll_position(self, tab_id: str, offset: float) -> None:
        positions = self.get_scroll_positions()
        positions[tab_id] = max(0.0, float(offset))
        self._set(SCROLL_KEY, positions)

    def retain_scroll_positions(self, tab_ids: Iterable[str]) -> Dict[str, float]:
        """Drop offsets of tabs that are no longer open; return what is left."""
        positions = self.get_scroll_positions()
        keep = set(tab_ids)
        kept = {k: v for k, v in positions.items() if k in keep}
        if len(kept) != len(positions):
            self._set(SCROLL_KEY, kept)
        return kept

    def remove_scroll_position(self, tab_id: str) -> None:
        positions = self.get_scroll_positions()
        if positions.pop(tab_id, None) is not None:
            self._set(SCROLL_KEY, positions)

    # -- preferences -----------------------------------------------------

    def get_preferences(self) -> Preferences:
        return Preferences.from_dict(self._get(PREFERENCES_KEY, {}))

    def set_preferences(self, preferences: Preferences) -> None:
        self._set(PREFERENCES_KEY, preferences.to_dict())

    def get_dark_mode(self) -> bool:
        value = self._get(DARK_MODE_KEY, False)
        return value if isinstance(value, bool) else False

    def set_dark_mode(self, enabled: bool) -> None:
        self._set(DARK_MODE_KEY, bool(enabled))


def _entry_or_none(data: Any) -> Optional[HistoryEntry]:
    if not isinstance(data, dict):
        return None
    try:
        return HistoryEntry.from_dict(data)
    except (KeyError, TypeError, ValueError):
        logger.debug("Skipping malformed history entry: %r", data)
        return None
