"""Main Textual application for kitab-tui."""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import ContentSwitcher, Header

from kitab_tui.config import Config
from kitab_tui.data.corpus import Corpus
from kitab_tui.data.types import Direction
from kitab_tui.debounce import Debouncer
from kitab_tui.history import HistoryStore
from kitab_tui.tab_state import (
    NAVIGATION_TAB_ID,
    SEARCH_TAB_ID,
    SearchResultsPayload,
    SessionManager,
    Tab,
    TabKind,
    VersePayload,
)
from kitab_tui.widgets import (
    HistorySelected,
    HistoryView,
    NavigationPane,
    ReaderScroll,
    ResultsList,
    SearchInput,
    StatusBar,
    TabBar,
    VerseView,
)

logger = logging.getLogger(__name__)

MIN_VERSE_SIZE = 8
MAX_VERSE_SIZE = 48


class KitabApp(App):
    """Arabic Bible reader with tabs, search and history."""

    TITLE = "Kitab-TUI"

    CSS = """
    #main {
        height: 1fr;
    }

    #switcher {
        width: 1fr;
        height: 100%;
    }

    #history-view {
        display: none;
    }

    #history-view.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
        Binding("right_square_bracket", "next_chapter", "Next chapter", show=False),
        Binding("left_square_bracket", "prev_chapter", "Prev chapter", show=False),
        Binding("right_curly_bracket", "next_tab", "Next tab", show=False),
        Binding("left_curly_bracket", "prev_tab", "Prev tab", show=False),
        Binding("x", "close_tab", "Close tab", show=False),
        Binding("slash", "show_search", "Search", show=False),
        Binding("g", "show_navigation", "Books", show=False),
        Binding("ctrl+t", "toggle_search_mode", "Search mode", show=False),
        Binding("H", "toggle_history", "History", show=False),
        Binding("d", "toggle_dark", "Dark mode", show=False),
        Binding("plus", "verse_size(2)", "Larger", show=False),
        Binding("minus", "verse_size(-2)", "Smaller", show=False),
        Binding("v", "toggle_combined", "Combined verses", show=False),
        Binding("i", "toggle_number_inside", "Verse number inside", show=False),
    ] + [
        Binding(str(n), f"activate_index({n - 1})", f"Tab {n}", show=False)
        for n in range(1, 10)
    ]

    def __init__(
        self,
        corpus: Corpus,
        store: HistoryStore,
        config: Optional[Config] = None,
    ) -> None:
        super().__init__()
        self._config = config or Config()
        self._debouncer = Debouncer(self._config.scroll_debounce, self.set_timer)
        self._session = SessionManager(corpus, store, debouncer=self._debouncer)
        # Programmatic scrolling must not be recorded as user scrolling
        self._restoring_scroll = False
        self._shown_verse_tab: Optional[str] = None

    @property
    def session(self) -> SessionManager:
        return self._session

    def compose(self) -> ComposeResult:
        """Create the UI layout."""
        yield Header()
        yield TabBar(id="tab-bar")
        with Horizontal(id="main"):
            with ContentSwitcher(initial="navigation-pane", id="switcher"):
                yield NavigationPane(self._session.corpus, id="navigation-pane")
                yield SearchInput(self._config.default_search_mode, id="search-pane")
                with ReaderScroll(id="reader-scroll"):
                    yield VerseView(id="verse-view")
                yield ResultsList(id="results-list")
            yield HistoryView(id="history-view")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        """Initialize the app after mounting."""
        self._apply_theme()
        self.query_one("#status-bar", StatusBar).set_search_mode(
            self._config.default_search_mode
        )
        self._refresh_view()

    def on_unmount(self) -> None:
        """Write pending scroll offsets however the app exits."""
        logger.debug("Flushing pending writes before exit")
        self._session.flush()

    # ==================== Tab display ====================

    def _refresh_view(self) -> None:
        """Show the active tab."""
        session = self._session
        tab = session.active
        self.query_one("#tab-bar", TabBar).update_tabs(session.tabs, tab.id)
        switcher = self.query_one("#switcher", ContentSwitcher)
        status = self.query_one("#status-bar", StatusBar)

        if tab.kind is TabKind.NAVIGATION:
            switcher.current = "navigation-pane"
            status.set_tab(tab.kind, tab.title)
            self.query_one("#nav-input").focus()
        elif tab.kind is TabKind.SEARCH_INPUT:
            switcher.current = "search-pane"
            status.set_tab(tab.kind, tab.title)
            self.query_one("#search-pane", SearchInput).focus_input()
        elif tab.kind is TabKind.VERSE:
            switcher.current = "reader-scroll"
            status.set_tab(tab.kind, tab.title)
            self._show_verse_tab(tab)
        elif tab.kind is TabKind.SEARCH_RESULTS:
            switcher.current = "results-list"
            status.set_tab(tab.kind, tab.title)
            self._show_results_tab(tab)
        else:
            raise ValueError(f"unknown tab kind {tab.kind!r}")

    def _show_verse_tab(self, tab: Tab) -> None:
        if not isinstance(tab.payload, VersePayload):
            logger.warning("Verse tab %s has no chapter payload", tab.id)
            return
        self._restoring_scroll = True
        self._shown_verse_tab = tab.id
        self.query_one("#verse-view", VerseView).update_content(
            tab.payload, self._session.preferences
        )
        self.query_one("#reader-scroll").focus()
        self.call_after_refresh(self._restore_scroll, tab.id)

    def _restore_scroll(self, tab_id: str) -> None:
        """Put a verse tab back where the reader left it."""
        if self._shown_verse_tab != tab_id:
            return
        view = self.query_one("#verse-view", VerseView)
        offset = self._session.scroll_position(tab_id)
        if offset or not view.scroll_to_highlighted():
            self.query_one("#reader-scroll", ReaderScroll).scroll_to(
                y=offset, animate=False
            )
        self.call_after_refresh(self._end_restore)

    def _end_restore(self) -> None:
        self._restoring_scroll = False

    def _show_results_tab(self, tab: Tab) -> None:
        if not isinstance(tab.payload, SearchResultsPayload):
            logger.warning("Results tab %s has no results payload", tab.id)
            return
        results = self.query_one("#results-list", ResultsList)
        results.set_results(list(tab.payload.results), tab.payload.query, tab.payload.mode)
        results.focus()
        if not tab.payload.results:
            self.query_one("#status-bar", StatusBar).show_message("لا توجد نتائج")

    def _refresh_history(self) -> None:
        history = self.query_one("#history-view", HistoryView)
        if history.has_class("visible"):
            history.update_entries(self._session.history())

    def _after_change(self) -> None:
        self._refresh_view()
        self._refresh_history()

    # ==================== Events ====================

    def on_navigation_pane_chapter_selected(self, event: NavigationPane.ChapterSelected) -> None:
        if self._session.open_verse_tab(event.coordinate) is None:
            self.query_one("#status-bar", StatusBar).show_message(
                f"{event.coordinate.reference}: لا توجد آيات"
            )
            return
        self._after_change()

    def on_search_input_search_submitted(self, event: SearchInput.SearchSubmitted) -> None:
        if self._session.open_search_results_tab(event.query, event.mode) is not None:
            self._after_change()

    def on_results_list_result_selected(self, event: ResultsList.ResultSelected) -> None:
        if self._session.open_search_hit(event.hit, event.query, event.mode) is not None:
            self._after_change()

    def on_history_selected(self, event: HistorySelected) -> None:
        if self._session.replay_history_entry(event.entry) is not None:
            self._after_change()

    def on_reader_scroll_scrolled(self, event: ReaderScroll.Scrolled) -> None:
        if self._restoring_scroll or self._shown_verse_tab is None:
            return
        if self._session.active_tab_id == self._shown_verse_tab:
            self._session.record_scroll(self._shown_verse_tab, event.offset)

    # ==================== Actions ====================

    def _navigate(self, direction: Direction) -> None:
        if self._session.navigate_active_chapter(direction) is not None:
            self._after_change()

    def action_next_chapter(self) -> None:
        self._navigate(Direction.NEXT)

    def action_prev_chapter(self) -> None:
        self._navigate(Direction.PREV)

    def action_next_tab(self) -> None:
        self._session.next_tab()
        self._refresh_view()

    def action_prev_tab(self) -> None:
        self._session.prev_tab()
        self._refresh_view()

    def action_activate_index(self, index: int) -> None:
        if self._session.activate_index(index):
            self._refresh_view()

    def action_close_tab(self) -> None:
        if self._session.close_tab(self._session.active_tab_id):
            self._refresh_view()

    def action_show_search(self) -> None:
        if self._session.activate_tab(SEARCH_TAB_ID):
            self._refresh_view()
        else:
            self.query_one("#search-pane", SearchInput).focus_input()

    def action_show_navigation(self) -> None:
        if self._session.activate_tab(NAVIGATION_TAB_ID):
            self._refresh_view()

    def action_toggle_search_mode(self) -> None:
        mode = self.query_one("#search-pane", SearchInput).toggle_mode()
        self.query_one("#status-bar", StatusBar).set_search_mode(mode)

    def action_toggle_history(self) -> None:
        history = self.query_one("#history-view", HistoryView)
        history.toggle_class("visible")
        self._refresh_history()

    def action_toggle_dark(self) -> None:
        self._session.set_dark_mode(not self._session.dark_mode)
        logger.debug("Dark mode %s", "on" if self._session.dark_mode else "off")
        self._apply_theme()

    def action_verse_size(self, delta: int) -> None:
        size = self._session.preferences.verse_size + delta
        size = max(MIN_VERSE_SIZE, min(MAX_VERSE_SIZE, size))
        prefs = self._session.update_preferences(verse_size=size)
        self.query_one("#status-bar", StatusBar).show_message(f"{prefs.verse_size}px")

    def action_toggle_combined(self) -> None:
        prefs = self._session.preferences
        self._session.update_preferences(combined_verse_view=not prefs.combined_verse_view)
        self._rerender_active_verse_tab()

    def action_toggle_number_inside(self) -> None:
        prefs = self._session.preferences
        self._session.update_preferences(verse_number_inside=not prefs.verse_number_inside)
        self._rerender_active_verse_tab()

    def _rerender_active_verse_tab(self) -> None:
        if self._session.active.kind is TabKind.VERSE:
            self._refresh_view()

    def _apply_theme(self) -> None:
        self.theme = "textual-dark" if self._session.dark_mode else "textual-light"
