"""Chapter reader widget."""

from typing import Dict, Optional

from rich.text import Text
from textual.containers import Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Static

from kitab_tui.backend.search import highlight_text
from kitab_tui.data.types import SearchMode, Verse
from kitab_tui.history import Preferences
from kitab_tui.tab_state import VersePayload


class VerseRow(Static):
    """Single verse display widget."""

    DEFAULT_CSS = """
    VerseRow {
        width: 100%;
        background: $surface;
        text-align: right;
        margin-bottom: 1;
    }
    VerseRow.highlighted {
        background: #333300;
    }
    """

    def __init__(self, verse: Verse, **kwargs):
        super().__init__("", **kwargs)
        self.verse = verse

    def set_state(
        self,
        highlighted: bool = False,
        search_query: str = "",
        search_mode: SearchMode = SearchMode.PARTIAL,
        number_inside: bool = False,
    ) -> None:
        """Update the verse state and re-render."""
        text = Text(justify="right")
        if number_inside:
            text.append(f"{self.verse.number} ", style="dim")
        else:
            text.append(f"{self.verse.number}", style="bold yellow")
            text.append("  ")
        text.append_text(highlight_text(self.verse.text, search_query, search_mode))
        self.update(text)

        self.remove_class("highlighted")
        if highlighted:
            self.add_class("highlighted")


class VerseView(Vertical):
    """Widget that displays one chapter."""

    DEFAULT_CSS = """
    VerseView {
        width: 100%;
        height: auto;
        background: $surface;
    }

    VerseView > .chapter-title {
        text-style: bold;
        text-align: right;
        background: $surface-darken-1;
    }

    VerseView > .chapter-subtitle {
        color: $text-muted;
        text-align: right;
        background: $surface-darken-1;
        margin-bottom: 1;
    }

    VerseView > .combined {
        text-align: right;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._payload: Optional[VersePayload] = None
        self._rows: Dict[int, VerseRow] = {}

    @property
    def payload(self) -> Optional[VersePayload]:
        return self._payload

    def update_content(self, payload: VersePayload, preferences: Preferences) -> None:
        """Rebuild the chapter display."""
        self._payload = payload
        self._rows.clear()
        self.remove_children()

        coord = payload.coordinate
        self.styles.padding = (0, max(0, round(preferences.content_margin * 2)))
        self.mount(Static(coord.book, classes="chapter-title"))
        self.mount(
            Static(f"{coord.testament} • الإصحاح {coord.chapter}", classes="chapter-subtitle")
        )

        query = payload.search_query or ""
        if preferences.combined_verse_view:
            paragraph = Text(justify="right")
            for i, verse in enumerate(payload.verses):
                if i:
                    paragraph.append(" ")
                paragraph.append(f"{verse.number} ", style="dim")
                paragraph.append_text(
                    highlight_text(verse.text, query, payload.search_mode)
                )
            self.mount(Static(paragraph, classes="combined"))
            return

        for verse in payload.verses:
            # No ids: rows are rebuilt on every chapter change
            row = VerseRow(verse)
            row.set_state(
                highlighted=verse.number == payload.highlighted_verse,
                search_query=query,
                search_mode=payload.search_mode,
                number_inside=preferences.verse_number_inside,
            )
            self._rows[verse.number] = row
            self.mount(row)

    def scroll_to_highlighted(self) -> bool:
        """Bring the highlighted verse to the top. Returns False if none."""
        if self._payload is None or self._payload.highlighted_verse is None:
            return False
        row = self._rows.get(self._payload.highlighted_verse)
        if row is None:
            return False
        row.scroll_visible(top=True, animate=False)
        return True


class ReaderScroll(VerticalScroll):
    """Scroll container that reports its vertical offset."""

    class Scrolled(Message):
        """Posted whenever the vertical offset changes."""

        def __init__(self, offset: float) -> None:
            self.offset = offset
            super().__init__()

    def watch_scroll_y(self, old_value: float, new_value: float) -> None:
        super().watch_scroll_y(old_value, new_value)
        if old_value != new_value:
            self.post_message(self.Scrolled(new_value))
