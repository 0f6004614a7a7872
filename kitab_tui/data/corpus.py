"""Corpus model: load, validate, look up and traverse chapters."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from kitab_tui.data.types import Book, Chapter, Coordinate, Direction, Testament, Verse

logger = logging.getLogger(__name__)


class CorpusError(ValueError):
    """Raised when a corpus document is malformed."""


class Corpus:
    """Read-only testament -> book -> chapter -> verse hierarchy.

    Names are the lookup keys; list order is only used for traversal.
    """

    def __init__(self, testaments: Sequence[Testament]) -> None:
        self._testaments: Tuple[Testament, ...] = tuple(testaments)
        self._validate()
        self._testament_index: Dict[str, int] = {
            t.name: i for i, t in enumerate(self._testaments)
        }
        self._book_index: Dict[Tuple[str, str], int] = {
            (t.name, b.name): i
            for t in self._testaments
            for i, b in enumerate(t.books)
        }

    # -- loading ---------------------------------------------------------

    @classmethod
    def from_data(cls, data: object) -> "Corpus":
        """Build a corpus from decoded JSON (list of testament dicts)."""
        if not isinstance(data, list):
            raise CorpusError("corpus must be a list of testaments")
        try:
            testaments = [_parse_testament(t) for t in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise CorpusError(f"malformed corpus: {exc}") from exc
        return cls(testaments)

    @classmethod
    def load(cls, path: Path) -> "Corpus":
        """Load a corpus JSON file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise CorpusError(f"cannot read corpus {path}: {exc}") from exc
        corpus = cls.from_data(data)
        logger.info("Loaded corpus from %s (%d testaments)", path, len(corpus.testaments))
        return corpus

    def _validate(self) -> None:
        if not self._testaments:
            raise CorpusError("corpus has no testaments")
        seen_testaments = set()
        for testament in self._testaments:
            if testament.name in seen_testaments:
                raise CorpusError(f"duplicate testament {testament.name!r}")
            seen_testaments.add(testament.name)
            if not testament.books:
                raise CorpusError(f"testament {testament.name!r} has no books")
            seen_books = set()
            for book in testament.books:
                if book.name in seen_books:
                    raise CorpusError(f"duplicate book {book.name!r} in {testament.name!r}")
                seen_books.add(book.name)
                if not book.chapters:
                    raise CorpusError(f"book {book.name!r} has no chapters")
                for pos, chapter in enumerate(book.chapters, start=1):
                    if chapter.number != pos:
                        raise CorpusError(
                            f"{book.name}: chapter {chapter.number} at position {pos}"
                        )
                    if not chapter.verses:
                        raise CorpusError(f"{book.name} {chapter.number} has no verses")
                    for vpos, verse in enumerate(chapter.verses, start=1):
                        if verse.number != vpos:
                            raise CorpusError(
                                f"{book.name} {chapter.number}: verse {verse.number} at position {vpos}"
                            )
                        if not isinstance(verse.text, str):
                            raise CorpusError(
                                f"{book.name} {chapter.number}:{verse.number} text is not a string"
                            )

    # -- lookups ---------------------------------------------------------

    @property
    def testaments(self) -> Tuple[Testament, ...]:
        return self._testaments

    def testament_names(self) -> List[str]:
        return [t.name for t in self._testaments]

    def book_names(self, testament: str) -> List[str]:
        found = self.get_testament(testament)
        return [b.name for b in found.books] if found else []

    def get_testament(self, name: str) -> Optional[Testament]:
        idx = self._testament_index.get(name)
        return self._testaments[idx] if idx is not None else None

    def get_book(self, testament: str, book: str) -> Optional[Book]:
        t_idx = self._testament_index.get(testament)
        b_idx = self._book_index.get((testament, book))
        if t_idx is None or b_idx is None:
            return None
        return self._testaments[t_idx].books[b_idx]

    def chapter_count(self, testament: str, book: str) -> int:
        """Number of chapters in a book, 0 if unknown."""
        found = self.get_book(testament, book)
        return found.chapter_count if found else 0

    def get_chapter(self, coordinate: Coordinate) -> Optional[Chapter]:
        found = self.get_book(coordinate.testament, coordinate.book)
        if found is None or not 1 <= coordinate.chapter <= found.chapter_count:
            return None
        return found.chapters[coordinate.chapter - 1]

    def verses(self, coordinate: Coordinate) -> Tuple[Verse, ...]:
        """Verses of a chapter, or an empty tuple if it does not resolve."""
        chapter = self.get_chapter(coordinate)
        return chapter.verses if chapter else ()

    def first_coordinate(self) -> Coordinate:
        testament = self._testaments[0]
        return Coordinate(testament.name, testament.books[0].name, 1)

    def iter_verses(self) -> Iterator[Tuple[Coordinate, Verse]]:
        """Yield every verse in canonical order."""
        for testament in self._testaments:
            for book in testament.books:
                for chapter in book.chapters:
                    coord = Coordinate(testament.name, book.name, chapter.number)
                    for verse in chapter.verses:
                        yield coord, verse

    # -- navigation ------------------------------------------------------

    def adjacent_chapter(
        self, coordinate: Coordinate, direction: Direction
    ) -> Optional[Coordinate]:
        """Chapter right before/after coordinate, crossing book and testament
        boundaries.

        Returns None at either end of the corpus and for coordinates that do
        not resolve; there is no wraparound.
        """
        t_idx = self._testament_index.get(coordinate.testament)
        b_idx = self._book_index.get((coordinate.testament, coordinate.book))
        if t_idx is None or b_idx is None:
            return None
        testament = self._testaments[t_idx]
        book = testament.books[b_idx]
        if not 1 <= coordinate.chapter <= book.chapter_count:
            return None

        if Direction(direction) is Direction.NEXT:
            if coordinate.chapter < book.chapter_count:
                return Coordinate(testament.name, book.name, coordinate.chapter + 1)
            if b_idx < len(testament.books) - 1:
                return Coordinate(testament.name, testament.books[b_idx + 1].name, 1)
            if t_idx < len(self._testaments) - 1:
                following = self._testaments[t_idx + 1]
                return Coordinate(following.name, following.books[0].name, 1)
            return None

        if coordinate.chapter > 1:
            return Coordinate(testament.name, book.name, coordinate.chapter - 1)
        if b_idx > 0:
            previous_book = testament.books[b_idx - 1]
            return Coordinate(testament.name, previous_book.name, previous_book.chapter_count)
        if t_idx > 0:
            previous = self._testaments[t_idx - 1]
            last_book = previous.books[-1]
            return Coordinate(previous.name, last_book.name, last_book.chapter_count)
        return None

    def next_chapter(self, coordinate: Coordinate) -> Optional[Coordinate]:
        return self.adjacent_chapter(coordinate, Direction.NEXT)

    def prev_chapter(self, coordinate: Coordinate) -> Optional[Coordinate]:
        return self.adjacent_chapter(coordinate, Direction.PREV)


def adjacent_chapter(
    corpus: Corpus, coordinate: Coordinate, direction: Direction
) -> Optional[Coordinate]:
    """Module-level form of Corpus.adjacent_chapter."""
    return corpus.adjacent_chapter(coordinate, direction)


def _parse_testament(data: dict) -> Testament:
    return Testament(
        name=str(data["name"]),
        books=tuple(_parse_book(b) for b in data["books"]),
    )


def _parse_book(data: dict) -> Book:
    return Book(
        name=str(data["name"]),
        chapters=tuple(_parse_chapter(c) for c in data["chapters"]),
    )


def _parse_chapter(data: dict) -> Chapter:
    return Chapter(
        number=int(data["number"]),
        verses=tuple(Verse(number=int(v["number"]), text=v["text"]) for v in data["verses"]),
    )
