"""Status bar widget."""

from typing import Optional

from rich.text import Text
from textual.widgets import Static

from kitab_tui.data.types import SearchMode
from kitab_tui.tab_state import TabKind


class StatusBar(Static):
    """Status bar showing current location and keybinding hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._kind = TabKind.NAVIGATION
        self._location = ""
        self._search_mode = SearchMode.PARTIAL
        self._message: Optional[str] = None

    def set_tab(self, kind: TabKind, location: str = "") -> None:
        """Set the active tab kind and its location label."""
        self._kind = kind
        self._location = location
        self._message = None
        self._update()

    def set_search_mode(self, mode: SearchMode) -> None:
        self._search_mode = SearchMode(mode)
        self._update()

    def show_message(self, message: str) -> None:
        """Show a temporary message."""
        self._message = message
        self._update()

    def clear_message(self) -> None:
        """Clear the temporary message."""
        self._message = None
        self._update()

    def _update(self) -> None:
        """Update the status bar display."""
        text = Text()

        if self._location:
            text.append(self._location, style="bold")
            text.append(" | ")

        mode_label = "جزئي" if self._search_mode is SearchMode.PARTIAL else "مطابق"
        text.append(f"[{mode_label}]", style="cyan")

        if self._message:
            text.append("  ")
            text.append(self._message, style="yellow")
        else:
            hints = self._get_hints()
            if hints:
                text.append("  ")
                for i, (key, desc) in enumerate(hints):
                    if i > 0:
                        text.append(" ", style="dim")
                    text.append(key, style="bold yellow")
                    text.append(f" {desc}", style="dim")

        self.update(text)

    def _get_hints(self) -> list[tuple[str, str]]:
        """Get keybinding hints for the active tab kind."""
        if self._kind is TabKind.VERSE:
            return [
                ("]/[", "chapter"),
                ("x", "close"),
                ("+/-", "size"),
                ("v", "combined"),
                ("H", "history"),
            ]
        elif self._kind is TabKind.SEARCH_RESULTS:
            return [
                ("j/k", "move"),
                ("Enter", "open"),
                ("x", "close"),
            ]
        elif self._kind is TabKind.SEARCH_INPUT:
            return [
                ("Enter", "search"),
                ("ctrl+t", "mode"),
            ]
        elif self._kind is TabKind.NAVIGATION:
            return [
                ("Enter", "open"),
                ("Esc", "back"),
                ("/", "search"),
            ]
        else:
            return []
