"""Search backend over the in-memory corpus."""

from kitab_tui.backend.normalize import normalize, normalize_with_offsets
from kitab_tui.backend.search import (
    SearchEngine,
    find_spans,
    highlight_markup,
    highlight_text,
)

__all__ = [
    "SearchEngine",
    "find_spans",
    "highlight_markup",
    "highlight_text",
    "normalize",
    "normalize_with_offsets",
]
