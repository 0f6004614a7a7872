"""Textual widgets for kitab-tui."""

from kitab_tui.widgets.history_view import HistorySelected, HistoryView
from kitab_tui.widgets.navigation_pane import NavigationPane
from kitab_tui.widgets.results_list import ResultsList
from kitab_tui.widgets.search_input import SearchInput
from kitab_tui.widgets.status_bar import StatusBar
from kitab_tui.widgets.tab_bar import TabBar
from kitab_tui.widgets.verse_view import ReaderScroll, VerseRow, VerseView

__all__ = [
    "HistorySelected",
    "HistoryView",
    "NavigationPane",
    "ResultsList",
    "SearchInput",
    "StatusBar",
    "TabBar",
    "ReaderScroll",
    "VerseRow",
    "VerseView",
]
