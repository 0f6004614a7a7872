"""Corpus model and data types."""

from kitab_tui.data.types import (
    Book,
    Chapter,
    Coordinate,
    Direction,
    SearchHit,
    SearchMode,
    Testament,
    Verse,
)
from kitab_tui.data.corpus import Corpus, CorpusError, adjacent_chapter
from kitab_tui.data.demo import demo_corpus

__all__ = [
    "Book",
    "Chapter",
    "Coordinate",
    "Direction",
    "SearchHit",
    "SearchMode",
    "Testament",
    "Verse",
    "Corpus",
    "CorpusError",
    "adjacent_chapter",
    "demo_corpus",
]
