"""History panel listing previously opened tabs."""

from datetime import datetime
from typing import List

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import ListItem, ListView, Static

from kitab_tui.history import HistoryEntry


class HistorySelected(Message):
    """Message sent when a history entry is selected for replay."""

    def __init__(self, entry: HistoryEntry) -> None:
        self.entry = entry
        super().__init__()


class HistoryView(Widget):
    """Side panel with the navigation/search history, newest first."""

    DEFAULT_CSS = """
    HistoryView {
        width: 40;
        height: 100%;
        background: $surface;
        border-left: solid $primary;
    }

    HistoryView > #history-header {
        height: 1;
        background: $primary-darken-2;
        color: $text-muted;
        padding: 0 1;
    }

    HistoryView > #history-list {
        height: 1fr;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._entries: List[HistoryEntry] = []

    def compose(self) -> ComposeResult:
        yield Static("السجل", id="history-header")
        yield ListView(id="history-list")

    def update_entries(self, entries: List[HistoryEntry]) -> None:
        """Fill the list with history entries."""
        self._entries = list(entries)
        lst = self.query_one("#history-list", ListView)
        lst.clear()

        if not self._entries:
            lst.append(ListItem(Static(Text("لا يوجد سجل", style="dim italic")), disabled=True))
            return

        for entry in self._entries:
            lst.append(ListItem(Static(self._format_entry(entry))))
        lst.index = 0

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        event.stop()
        index = self.query_one("#history-list", ListView).index
        if index is not None and 0 <= index < len(self._entries):
            self.post_message(HistorySelected(self._entries[index]))

    def _format_entry(self, entry: HistoryEntry) -> Text:
        text = Text(justify="right")
        style = "bold cyan" if entry.kind == "verse" else "bold magenta"
        text.append(entry.title, style=style)
        if entry.highlighted_verse:
            text.append(f":{entry.highlighted_verse}", style=style)
        if entry.timestamp:
            stamp = datetime.fromtimestamp(entry.timestamp).strftime("%H:%M")
            text.append(f"  {stamp}", style="dim")
        return text
