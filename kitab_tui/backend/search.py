"""Corpus search and match highlighting."""

import logging
import re
from typing import List, Optional, Pattern, Tuple

from rich.markup import escape
from rich.text import Text

from kitab_tui.backend.normalize import is_mark, normalize, normalize_with_offsets
from kitab_tui.data.corpus import Corpus
from kitab_tui.data.types import Coordinate, SearchHit, SearchMode, Verse

logger = logging.getLogger(__name__)

HIGHLIGHT_STYLE = "bold black on yellow"


def _compile(query: str, mode: SearchMode) -> Optional[Pattern[str]]:
    """Compile the matching rule for a query, or None for an empty query."""
    normalized = normalize(query.strip())
    if not normalized.strip():
        return None
    escaped = re.escape(normalized)
    if SearchMode(mode) is SearchMode.EXACT:
        return re.compile(rf"(?<!\w){escaped}(?!\w)")
    return re.compile(escaped)


def find_spans(
    text: str, query: str, mode: SearchMode = SearchMode.PARTIAL
) -> List[Tuple[int, int]]:
    """Locate matches of query in raw text.

    Uses the same normalization and matching rule as SearchEngine.search,
    so every span covers exactly what made the verse match. Spans are
    (start, end) indices into text, extended over trailing diacritics.
    """
    pattern = _compile(query, mode)
    if pattern is None:
        return []
    normalized, offsets = normalize_with_offsets(text)
    spans: List[Tuple[int, int]] = []
    for match in pattern.finditer(normalized):
        if match.end() == match.start():
            continue
        start = offsets[match.start()]
        end = offsets[match.end() - 1] + 1
        while end < len(text) and is_mark(text[end]):
            end += 1
        if spans and start <= spans[-1][1]:
            spans[-1] = (spans[-1][0], max(end, spans[-1][1]))
        else:
            spans.append((start, end))
    return spans


def highlight_markup(
    text: str,
    query: str,
    mode: SearchMode = SearchMode.PARTIAL,
    style: str = HIGHLIGHT_STYLE,
) -> str:
    """Return Rich console markup with matches wrapped in style.

    Verse text is escaped before wrapping, so brackets in the corpus are
    never read as markup.
    """
    parts: List[str] = []
    last_end = 0
    for start, end in find_spans(text, query, mode):
        parts.append(escape(text[last_end:start]))
        parts.append(f"[{style}]{escape(text[start:end])}[/]")
        last_end = end
    parts.append(escape(text[last_end:]))
    return "".join(parts)


def highlight_text(
    text: str,
    query: str,
    mode: SearchMode = SearchMode.PARTIAL,
    style: str = HIGHLIGHT_STYLE,
    base_style: str = "",
) -> Text:
    """Return a Rich Text with matches styled."""
    result = Text(text, style=base_style)
    if query:
        for start, end in find_spans(text, query, mode):
            result.stylize(style, start, end)
    return result


class SearchEngine:
    """Linear scan of the corpus in canonical order."""

    def __init__(self, corpus: Corpus) -> None:
        self._corpus = corpus
        self._normalized: Optional[List[Tuple[Coordinate, Verse, str]]] = None

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    def _entries(self) -> List[Tuple[Coordinate, Verse, str]]:
        if self._normalized is None:
            self._normalized = [
                (coord, verse, normalize(verse.text))
                for coord, verse in self._corpus.iter_verses()
            ]
        return self._normalized

    def search(self, query: str, mode: SearchMode = SearchMode.PARTIAL) -> List[SearchHit]:
        """Find verses matching query.

        Args:
            query: Search text; empty queries return no hits
            mode: PARTIAL for substring, EXACT for whole-token match

        Returns:
            Hits in corpus order
        """
        pattern = _compile(query, mode)
        if pattern is None:
            return []
        hits = [
            SearchHit(coordinate=coord, verse_number=verse.number, text=verse.text)
            for coord, verse, normalized in self._entries()
            if pattern.search(normalized)
        ]
        logger.debug("search %r (%s): %d hits", query, SearchMode(mode).value, len(hits))
        return hits
