"""Tab bar widget showing open tabs."""

from typing import List

from rich.text import Text
from textual.widgets import Static

from kitab_tui.tab_state import Tab


class TabBar(Static):
    """Horizontal bar showing open tabs, 1 line, docked under Header."""

    DEFAULT_CSS = """
    TabBar {
        dock: top;
        height: 1;
        background: $surface-darken-1;
    }
    """

    def update_tabs(self, tabs: List[Tab], active_id: str) -> None:
        """Update the tab bar display.

        Args:
            tabs: Tabs in display order.
            active_id: Id of the active tab.
        """
        parts = Text()
        for i, tab in enumerate(tabs):
            marker = " ×" if tab.closable else ""
            label = f" {i + 1}:{tab.title}{marker} "
            if tab.id == active_id:
                parts.append(label, style="reverse")
            else:
                parts.append(label, style="dim" if tab.collapsed else "")
            if i < len(tabs) - 1:
                parts.append("|", style="dim")
        self.update(parts)
