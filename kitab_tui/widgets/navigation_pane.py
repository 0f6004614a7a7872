"""Testament/book/chapter picker shown in the navigation tab."""

from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, ListItem, ListView, Static

from kitab_tui.backend.normalize import normalize
from kitab_tui.data.corpus import Corpus
from kitab_tui.data.types import Coordinate


class NavigationPane(Widget):
    """Drill down testament -> book -> chapter and open the chapter."""

    DEFAULT_CSS = """
    NavigationPane {
        width: 100%;
        height: 100%;
        background: $surface;
        padding: 0 1;
    }

    NavigationPane > .picker-title {
        height: 1;
        text-style: bold;
        color: $primary;
        text-align: right;
    }

    NavigationPane > .picker-input {
        height: 3;
    }

    NavigationPane > .picker-list {
        height: 1fr;
    }

    NavigationPane > .picker-hint {
        height: 1;
        color: $text-muted;
    }
    """

    class ChapterSelected(Message):
        """Message sent when a chapter is picked."""

        def __init__(self, coordinate: Coordinate) -> None:
            self.coordinate = coordinate
            super().__init__()

    def __init__(self, corpus: Corpus, **kwargs) -> None:
        super().__init__(**kwargs)
        self._corpus = corpus
        self._mode = "testament"  # "testament", "book", "chapter"
        self._testament: Optional[str] = None
        self._book: Optional[str] = None
        self._items: List[str] = []

    def compose(self) -> ComposeResult:
        yield Static("الكتب", classes="picker-title", id="nav-title")
        yield Input(placeholder="تصفية...", classes="picker-input", id="nav-input")
        yield ListView(classes="picker-list", id="nav-list")
        yield Static("Enter=open, Esc=back", classes="picker-hint")

    def on_mount(self) -> None:
        """Start at the testament level."""
        self.show_testaments()

    @property
    def mode(self) -> str:
        return self._mode

    def show_testaments(self) -> None:
        self._mode = "testament"
        self._testament = None
        self._book = None
        self.query_one("#nav-title", Static).update("الكتب")
        self._reset_input()
        self._fill(self._corpus.testament_names())

    def show_books(self, testament: str, query: str = "") -> None:
        self._mode = "book"
        self._testament = testament
        self._book = None
        self.query_one("#nav-title", Static).update(testament)
        names = self._corpus.book_names(testament)
        needle = normalize(query.strip())
        if needle:
            names = [n for n in names if needle in normalize(n)]
        self._fill(names)

    def show_chapters(self, testament: str, book: str) -> None:
        self._mode = "chapter"
        self._testament = testament
        self._book = book
        count = self._corpus.chapter_count(testament, book)
        self.query_one("#nav-title", Static).update(f"{book} ({count})")
        self._reset_input(f"الإصحاح (1-{count})...")
        self._fill([str(n) for n in range(1, count + 1)])

    def go_back(self) -> None:
        """Step up one level."""
        if self._mode == "chapter" and self._testament:
            self._reset_input()
            self.show_books(self._testament)
        elif self._mode == "book":
            self.show_testaments()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter books while typing."""
        event.stop()
        if self._mode == "book" and self._testament:
            self.show_books(self._testament, event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the input picks the highlighted item or a typed chapter."""
        event.stop()
        value = event.value.strip()
        if self._mode == "chapter" and value.isdigit():
            self._select_chapter(int(value))
            return
        lst = self.query_one("#nav-list", ListView)
        if lst.index is not None:
            self._select(lst.index)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Handle list item selection."""
        event.stop()
        lst = self.query_one("#nav-list", ListView)
        if lst.index is not None:
            self._select(lst.index)

    def on_key(self, event) -> None:
        """Handle key events."""
        if event.key == "escape":
            event.stop()
            self.go_back()
        elif event.key in ("down", "up"):
            event.stop()
            lst = self.query_one("#nav-list", ListView)
            if event.key == "down":
                lst.action_cursor_down()
            else:
                lst.action_cursor_up()

    def _select(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            return
        value = self._items[index]
        if self._mode == "testament":
            self._reset_input()
            self.show_books(value)
        elif self._mode == "book" and self._testament:
            self.show_chapters(self._testament, value)
        elif self._mode == "chapter":
            self._select_chapter(int(value))

    def _select_chapter(self, chapter: int) -> None:
        if not self._testament or not self._book:
            return
        if 1 <= chapter <= self._corpus.chapter_count(self._testament, self._book):
            self.post_message(
                self.ChapterSelected(Coordinate(self._testament, self._book, chapter))
            )

    def _reset_input(self, placeholder: str = "تصفية...") -> None:
        inp = self.query_one("#nav-input", Input)
        with inp.prevent(Input.Changed):
            inp.value = ""
        inp.placeholder = placeholder

    def _fill(self, items: List[str]) -> None:
        self._items = items
        lst = self.query_one("#nav-list", ListView)
        lst.clear()
        for item in items:
            lst.append(ListItem(Static(Text(item, justify="right"))))
        if items:
            lst.index = 0
