"""Search results list widget (key word in context)."""

from typing import List, Optional

from rich.text import Text
from textual.message import Message
from textual.widgets import ListItem, ListView, Static

from kitab_tui.backend.search import find_spans, highlight_text
from kitab_tui.data.types import SearchHit, SearchMode

SNIPPET_WIDTH = 70
CONTEXT_BEFORE = 25


class ResultsList(ListView):
    """List widget for displaying search hits of one results tab."""

    DEFAULT_CSS = """
    ResultsList {
        width: 100%;
        height: 100%;
        background: $surface;
    }

    ResultsList > ListItem {
        padding: 0 1;
        height: auto;
    }

    ResultsList > ListItem.--highlight {
        background: $accent;
    }
    """

    class ResultSelected(Message):
        """Message sent when a search result is selected."""

        def __init__(self, hit: SearchHit, query: str, mode: SearchMode) -> None:
            self.hit = hit
            self.query = query
            self.mode = mode
            super().__init__()

    BINDINGS = [
        ("j", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
    ]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._results: List[SearchHit] = []
        self._query = ""
        self._mode = SearchMode.PARTIAL

    def set_results(self, results: List[SearchHit], query: str, mode: SearchMode) -> None:
        """Set the search results to display.

        Args:
            results: Hits in corpus order
            query: The search query (for highlighting)
            mode: Mode the query ran with
        """
        self._results = list(results)
        self._query = query
        self._mode = SearchMode(mode)
        self.clear()

        header = Text(justify="right")
        header.append(f"{len(self._results)} نتيجة لـ '{query}'", style="bold")
        self.append(ListItem(Static(header), disabled=True))

        for hit in self._results:
            # Don't use IDs to avoid DuplicateIds error on re-render
            self.append(ListItem(Static(self._format_result(hit))))

        if self._results:
            self.index = 1

    def get_selected_result(self) -> Optional[SearchHit]:
        """Get the currently selected result."""
        if self.index is None:
            return None
        position = self.index - 1
        if 0 <= position < len(self._results):
            return self._results[position]
        return None

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        event.stop()
        hit = self.get_selected_result()
        if hit:
            self.post_message(self.ResultSelected(hit, self._query, self._mode))

    def _format_result(self, hit: SearchHit) -> Text:
        """Reference followed by a snippet around the first match."""
        text = Text(justify="right")
        text.append(hit.reference, style="bold cyan")
        text.append("  ")

        snippet = highlight_text(hit.text, self._query, self._mode)
        if len(hit.text) > SNIPPET_WIDTH:
            spans = find_spans(hit.text, self._query, self._mode)
            first = spans[0][0] if spans else 0
            start = max(0, first - CONTEXT_BEFORE)
            end = min(len(hit.text), start + SNIPPET_WIDTH)
            snippet = snippet.divide([start, end])[1]
            if start:
                text.append("...", style="dim")
            text.append_text(snippet)
            if end < len(hit.text):
                text.append("...", style="dim")
            return text

        text.append_text(snippet)
        return text
