"""Tab state and the session manager that owns it."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from kitab_tui.backend.search import SearchEngine
from kitab_tui.data.corpus import Corpus, CorpusError
from kitab_tui.data.types import Coordinate, Direction, SearchHit, SearchMode, Verse
from kitab_tui.debounce import Debouncer
from kitab_tui.history import HistoryEntry, HistoryStore, Preferences

logger = logging.getLogger(__name__)

NAVIGATION_TAB_ID = "navigation"
SEARCH_TAB_ID = "search-input"
NAVIGATION_TITLE = "الكتب"
SEARCH_TITLE = "البحث"
RESULTS_TITLE_PREFIX = "نتائج: "


class TabKind(str, Enum):
    """Closed set of tab kinds."""

    NAVIGATION = "navigation"
    SEARCH_INPUT = "search-input"
    VERSE = "verse"
    SEARCH_RESULTS = "search-results"

    @property
    def is_permanent(self) -> bool:
        """Navigation and search input are singletons that cannot be closed."""
        return self in (TabKind.NAVIGATION, TabKind.SEARCH_INPUT)


@dataclass(frozen=True)
class VersePayload:
    """A chapter being read."""

    coordinate: Coordinate
    verses: Tuple[Verse, ...]
    highlighted_verse: Optional[int] = None
    search_query: Optional[str] = None  # re-highlight matches in the chapter
    search_mode: SearchMode = SearchMode.PARTIAL


@dataclass(frozen=True)
class SearchResultsPayload:
    """Hits for one query run."""

    query: str
    mode: SearchMode
    results: Tuple[SearchHit, ...]


Payload = Union[VersePayload, SearchResultsPayload, None]


@dataclass
class Tab:
    """One open view."""

    id: str
    kind: TabKind
    title: str
    payload: Payload = None
    collapsed: bool = False

    @property
    def closable(self) -> bool:
        return not self.kind.is_permanent

    def to_history_entry(self) -> Optional[HistoryEntry]:
        """Snapshot for the history log; permanent tabs have none."""
        if self.kind is TabKind.VERSE and isinstance(self.payload, VersePayload):
            return HistoryEntry(
                kind=self.kind.value,
                title=self.title,
                tab_id=self.id,
                coordinate=self.payload.coordinate,
                highlighted_verse=self.payload.highlighted_verse,
                search_query=self.payload.search_query,
                search_mode=self.payload.search_mode,
            )
        if self.kind is TabKind.SEARCH_RESULTS and isinstance(self.payload, SearchResultsPayload):
            return HistoryEntry(
                kind=self.kind.value,
                title=self.title,
                tab_id=self.id,
                search_query=self.payload.query,
                search_mode=self.payload.mode,
            )
        return None


class SessionManager:
    """Owns the ordered tab list, the active tab and the scroll map.

    Every mutation goes through this class and completes before it
    returns. The navigation and search-input tabs are always the first
    two tabs and exactly the active tab is expanded.
    """

    def __init__(
        self,
        corpus: Corpus,
        store: HistoryStore,
        engine: Optional[SearchEngine] = None,
        debouncer: Optional[Debouncer] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._corpus = corpus
        self._store = store
        self._engine = engine or SearchEngine(corpus)
        self._debouncer = debouncer
        self._clock = clock or time.time_ns
        self._last_stamp = 0

        self._preferences: Preferences = store.get_preferences()
        self._dark_mode: bool = store.get_dark_mode()

        self._tabs: List[Tab] = [
            Tab(NAVIGATION_TAB_ID, TabKind.NAVIGATION, NAVIGATION_TITLE),
            Tab(SEARCH_TAB_ID, TabKind.SEARCH_INPUT, SEARCH_TITLE),
        ]
        initial = self._restore_last_tab() or self._first_chapter_tab()
        self._tabs.append(initial)
        self._active_id = initial.id
        self._sync_collapsed()
        # Only the restored tab survives a restart
        self._scroll_positions: Dict[str, float] = store.retain_scroll_positions(
            tab.id for tab in self._tabs
        )

    # -- accessors -------------------------------------------------------

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @property
    def engine(self) -> SearchEngine:
        return self._engine

    @property
    def tabs(self) -> List[Tab]:
        return list(self._tabs)

    @property
    def count(self) -> int:
        return len(self._tabs)

    @property
    def active_tab_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> Tab:
        """Get the active tab."""
        tab = self.get(self._active_id)
        if tab is None:
            raise LookupError(f"active tab {self._active_id!r} is not open")
        return tab

    @property
    def active_index(self) -> int:
        return self._index_of(self._active_id)

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    def get(self, tab_id: str) -> Optional[Tab]:
        for tab in self._tabs:
            if tab.id == tab_id:
                return tab
        return None

    def history(self) -> List[HistoryEntry]:
        """History log, newest first."""
        return list(reversed(self._store.history()))

    # -- operations ------------------------------------------------------

    def open_verse_tab(
        self,
        coordinate: Coordinate,
        highlighted_verse: Optional[int] = None,
        search_query: Optional[str] = None,
        search_mode: SearchMode = SearchMode.PARTIAL,
    ) -> Optional[Tab]:
        """Open a chapter in a new tab and activate it.

        Returns None (and changes nothing) if the coordinate has no verses.
        """
        tab = self._build_verse_tab(
            coordinate, highlighted_verse, search_query, search_mode
        )
        if tab is None:
            logger.info("No verses for %s, not opening a tab", coordinate.reference)
            return None
        self._append_and_activate(tab)
        self._record(tab)
        return tab

    def navigate_active_chapter(self, direction: Direction) -> Optional[Tab]:
        """Replace the active verse tab's chapter with its neighbour.

        The tab keeps its id and position. No-op at either end of the
        corpus or when the active tab is not a verse tab.
        """
        tab = self.active
        if tab.kind is not TabKind.VERSE or not isinstance(tab.payload, VersePayload):
            logger.debug("Ignoring chapter navigation on %s tab", tab.kind.value)
            return None
        target = self._corpus.adjacent_chapter(tab.payload.coordinate, direction)
        if target is None:
            logger.debug(
                "No %s chapter from %s",
                Direction(direction).value,
                tab.payload.coordinate.reference,
            )
            return None
        verses = self._corpus.verses(target)
        if not verses:
            return None
        tab.title = target.reference
        tab.payload = VersePayload(coordinate=target, verses=verses)
        self.record_scroll(tab.id, 0.0)
        self._record(tab)
        return tab

    def open_search_results_tab(
        self, query: str, mode: SearchMode = SearchMode.PARTIAL
    ) -> Optional[Tab]:
        """Run a search and show the hits in a new tab.

        Every call opens a new tab, even for a query that is already open.
        """
        query = query.strip()
        if not query:
            return None
        mode = SearchMode(mode)
        results = tuple(self._engine.search(query, mode))
        tab = Tab(
            id=f"search-results-{self._next_stamp()}",
            kind=TabKind.SEARCH_RESULTS,
            title=f"{RESULTS_TITLE_PREFIX}{query}",
            payload=SearchResultsPayload(query=query, mode=mode, results=results),
        )
        self._append_and_activate(tab)
        self._record(tab)
        logger.info("Search %r (%s): %d results", query, mode.value, len(results))
        return tab

    def open_search_hit(
        self, hit: SearchHit, query: str, mode: SearchMode = SearchMode.PARTIAL
    ) -> Optional[Tab]:
        """Open the chapter of a hit with the verse and query highlighted."""
        return self.open_verse_tab(
            hit.coordinate,
            highlighted_verse=hit.verse_number,
            search_query=query,
            search_mode=mode,
        )

    def close_tab(self, tab_id: str) -> bool:
        """Close a tab. Returns False for permanent or unknown tabs.

        If the closed tab was active, the last tab in display order
        becomes active.
        """
        index = self._index_of(tab_id)
        if index < 0:
            return False
        tab = self._tabs[index]
        if tab.kind.is_permanent:
            logger.debug("Refusing to close permanent tab %s", tab_id)
            return False
        self._tabs.pop(index)
        if self._active_id == tab_id:
            self._active_id = self._tabs[-1].id
        self._sync_collapsed()

        self._scroll_positions.pop(tab_id, None)
        if self._debouncer is not None:
            self._debouncer.cancel(tab_id)
        self._store.remove_scroll_position(tab_id)
        return True

    def activate_tab(self, tab_id: str) -> bool:
        """Make a tab active. Returns False if already active or unknown."""
        if tab_id == self._active_id or self.get(tab_id) is None:
            return False
        self._active_id = tab_id
        self._sync_collapsed()
        return True

    def activate_index(self, index: int) -> bool:
        """Switch to tab at index. Returns True on success."""
        if index < 0 or index >= len(self._tabs):
            return False
        return self.activate_tab(self._tabs[index].id)

    def next_tab(self) -> int:
        """Switch to next tab (cyclic). Returns new index."""
        index = (self.active_index + 1) % len(self._tabs)
        self.activate_index(index)
        return index

    def prev_tab(self) -> int:
        """Switch to previous tab (cyclic). Returns new index."""
        index = (self.active_index - 1) % len(self._tabs)
        self.activate_index(index)
        return index

    def replay_history_entry(self, entry: HistoryEntry) -> Optional[Tab]:
        """Reopen a tab from a history record."""
        if entry.kind == TabKind.VERSE.value and entry.coordinate is not None:
            return self.open_verse_tab(
                entry.coordinate,
                highlighted_verse=entry.highlighted_verse,
                search_query=entry.search_query,
                search_mode=entry.search_mode,
            )
        if entry.kind == TabKind.SEARCH_RESULTS.value and entry.search_query:
            return self.open_search_results_tab(entry.search_query, entry.search_mode)
        logger.debug("Cannot replay history entry %r", entry)
        return None

    # -- scroll positions ------------------------------------------------

    def scroll_position(self, tab_id: str) -> float:
        return self._scroll_positions.get(tab_id, 0.0)

    def record_scroll(self, tab_id: str, offset: float) -> None:
        """Remember a tab's scroll offset; the store write is debounced."""
        if self.get(tab_id) is None:
            return
        offset = max(0.0, float(offset))
        self._scroll_positions[tab_id] = offset
        if self._debouncer is None:
            self._store.set_scroll_position(tab_id, offset)
            return
        self._debouncer.call(
            tab_id, lambda: self._store.set_scroll_position(tab_id, offset)
        )

    def flush(self) -> None:
        """Write out pending scroll offsets now."""
        if self._debouncer is not None:
            self._debouncer.flush()

    # -- preferences -----------------------------------------------------

    def update_preferences(self, **changes) -> Preferences:
        """Apply and persist preference changes; invalid values are dropped."""
        merged = self._preferences.to_dict()
        merged.update(changes)
        self._preferences = Preferences.from_dict(merged)
        self._store.set_preferences(self._preferences)
        return self._preferences

    def set_dark_mode(self, enabled: bool) -> None:
        self._dark_mode = bool(enabled)
        self._store.set_dark_mode(self._dark_mode)

    # -- internals -------------------------------------------------------

    def _index_of(self, tab_id: str) -> int:
        for i, tab in enumerate(self._tabs):
            if tab.id == tab_id:
                return i
        return -1

    def _next_stamp(self) -> int:
        stamp = self._clock()
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return stamp

    def _build_verse_tab(
        self,
        coordinate: Coordinate,
        highlighted_verse: Optional[int],
        search_query: Optional[str],
        search_mode: SearchMode,
        tab_id: Optional[str] = None,
    ) -> Optional[Tab]:
        verses = self._corpus.verses(coordinate)
        if not verses:
            return None
        if highlighted_verse is not None and not 1 <= highlighted_verse <= len(verses):
            highlighted_verse = None
        if tab_id is None:
            tab_id = (
                f"verse-{coordinate.testament}-{coordinate.book}-"
                f"{coordinate.chapter}-{self._next_stamp()}"
            )
        return Tab(
            id=tab_id,
            kind=TabKind.VERSE,
            title=coordinate.reference,
            payload=VersePayload(
                coordinate=coordinate,
                verses=verses,
                highlighted_verse=highlighted_verse,
                search_query=search_query or None,
                search_mode=SearchMode(search_mode),
            ),
        )

    def _append_and_activate(self, tab: Tab) -> None:
        self._tabs.append(tab)
        self._active_id = tab.id
        self._sync_collapsed()

    def _sync_collapsed(self) -> None:
        for tab in self._tabs:
            tab.collapsed = tab.id != self._active_id

    def _record(self, tab: Tab) -> None:
        entry = tab.to_history_entry()
        if entry is not None:
            self._store.append_history(entry)

    def _first_chapter_tab(self) -> Tab:
        coordinate = self._corpus.first_coordinate()
        tab = self._build_verse_tab(
            coordinate,
            None,
            None,
            SearchMode.PARTIAL,
            tab_id=(
                f"verse-{coordinate.testament}-{coordinate.book}-"
                f"{coordinate.chapter}-initial"
            ),
        )
        if tab is None:
            raise CorpusError(f"{coordinate.reference} has no verses")
        return tab

    def _restore_last_tab(self) -> Optional[Tab]:
        """Rebuild the tab that was open at exit, if it still resolves."""
        entry = self._store.get_last_opened_tab()
        if entry is None:
            return None
        tab_id = entry.tab_id
        if not tab_id or tab_id in (NAVIGATION_TAB_ID, SEARCH_TAB_ID):
            tab_id = None

        if entry.kind == TabKind.VERSE.value and entry.coordinate is not None:
            return self._build_verse_tab(
                entry.coordinate,
                entry.highlighted_verse,
                entry.search_query,
                entry.search_mode,
                tab_id=tab_id,
            )
        if entry.kind == TabKind.SEARCH_RESULTS.value and entry.search_query:
            mode = SearchMode(entry.search_mode)
            results = tuple(self._engine.search(entry.search_query, mode))
            return Tab(
                id=tab_id or f"search-results-{self._next_stamp()}",
                kind=TabKind.SEARCH_RESULTS,
                title=f"{RESULTS_TITLE_PREFIX}{entry.search_query}",
                payload=SearchResultsPayload(
                    query=entry.search_query, mode=mode, results=results
                ),
            )
        return None
