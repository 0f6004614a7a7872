"""Data types for kitab-tui."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SearchMode(str, Enum):
    """How a query is matched against verse text."""

    PARTIAL = "partial"  # normalized substring
    EXACT = "exact"  # normalized whole token

    @classmethod
    def parse(cls, value, default: Optional["SearchMode"] = None) -> "SearchMode":
        """Coerce a stored value to a SearchMode, falling back to default."""
        try:
            return cls(value)
        except ValueError:
            return default if default is not None else cls.PARTIAL


class Direction(str, Enum):
    """Chapter navigation direction."""

    NEXT = "next"
    PREV = "prev"


@dataclass(frozen=True)
class Verse:
    """A single verse."""

    number: int
    text: str


@dataclass(frozen=True)
class Chapter:
    """A chapter: dense, 1-based verses."""

    number: int
    verses: Tuple[Verse, ...]


@dataclass(frozen=True)
class Book:
    """A book: dense, 1-based chapters."""

    name: str
    chapters: Tuple[Chapter, ...]

    @property
    def chapter_count(self) -> int:
        return len(self.chapters)


@dataclass(frozen=True)
class Testament:
    """A testament: an ordered run of books."""

    name: str
    books: Tuple[Book, ...]


@dataclass(frozen=True)
class Coordinate:
    """Lookup key for one chapter, resolved by name and number."""

    testament: str
    book: str
    chapter: int

    @property
    def reference(self) -> str:
        """Return formatted reference string."""
        return f"{self.book} {self.chapter}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "testament": self.testament,
            "book": self.book,
            "chapter": self.chapter,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Coordinate":
        """Create from dictionary."""
        return cls(
            testament=str(data["testament"]),
            book=str(data["book"]),
            chapter=int(data["chapter"]),
        )


@dataclass(frozen=True)
class SearchHit:
    """A search result hit."""

    coordinate: Coordinate
    verse_number: int
    text: str

    @property
    def book(self) -> str:
        return self.coordinate.book

    @property
    def chapter(self) -> int:
        return self.coordinate.chapter

    @property
    def reference(self) -> str:
        """Return formatted reference string."""
        return f"{self.coordinate.book} {self.coordinate.chapter}:{self.verse_number}"
