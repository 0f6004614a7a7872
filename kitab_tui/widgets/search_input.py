"""Search query input shown in the search tab."""

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, Static

from kitab_tui.data.types import SearchMode

_MODE_LABELS = {
    SearchMode.PARTIAL: "بحث جزئي",
    SearchMode.EXACT: "كلمة كاملة",
}


class SearchInput(Widget):
    """Query input with a partial/exact mode switch."""

    DEFAULT_CSS = """
    SearchInput {
        width: 100%;
        height: 100%;
        background: $surface;
        padding: 1 2;
    }

    SearchInput > .search-title {
        height: 1;
        text-style: bold;
        color: $primary;
        text-align: right;
    }

    SearchInput > .search-text {
        height: 3;
    }

    SearchInput > .search-mode {
        height: 1;
        color: $text-muted;
        text-align: right;
    }
    """

    class SearchSubmitted(Message):
        """Message sent when a non-empty query is submitted."""

        def __init__(self, query: str, mode: SearchMode) -> None:
            self.query = query
            self.mode = mode
            super().__init__()

    def __init__(self, mode: SearchMode = SearchMode.PARTIAL, **kwargs) -> None:
        super().__init__(**kwargs)
        self._mode = SearchMode(mode)

    def compose(self) -> ComposeResult:
        yield Static("البحث", classes="search-title")
        yield Input(placeholder="اكتب كلمة البحث...", classes="search-text", id="search-text")
        yield Static("", classes="search-mode", id="search-mode")

    def on_mount(self) -> None:
        self._render_mode()

    @property
    def mode(self) -> SearchMode:
        return self._mode

    @property
    def input_widget(self) -> Input:
        """Get the input widget."""
        return self.query_one("#search-text", Input)

    def set_mode(self, mode: SearchMode) -> None:
        self._mode = SearchMode(mode)
        self._render_mode()

    def toggle_mode(self) -> SearchMode:
        """Switch between partial and exact matching."""
        if self._mode is SearchMode.PARTIAL:
            self.set_mode(SearchMode.EXACT)
        else:
            self.set_mode(SearchMode.PARTIAL)
        return self._mode

    def set_query(self, query: str) -> None:
        self.input_widget.value = query

    def focus_input(self) -> None:
        self.input_widget.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Empty queries are ignored."""
        event.stop()
        query = event.value.strip()
        if query:
            self.post_message(self.SearchSubmitted(query, self._mode))

    def _render_mode(self) -> None:
        text = Text(justify="right")
        text.append(_MODE_LABELS[self._mode], style="bold cyan")
        text.append("  (ctrl+t)", style="dim")
        self.query_one("#search-mode", Static).update(text)
