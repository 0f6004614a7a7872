"""Shared fixtures."""

from typing import Callable, List, Tuple

import pytest

from kitab_tui.data import Corpus
from kitab_tui.history import HistoryStore, MemoryStore


def make_corpus(layout) -> Corpus:
    """Build a corpus from [(testament, [(book, [verse counts per chapter])])]."""
    data = []
    for testament, books in layout:
        data.append({
            "name": testament,
            "books": [
                {
                    "name": book,
                    "chapters": [
                        {
                            "number": c,
                            "verses": [
                                {"number": v, "text": f"{book} {c}:{v}"}
                                for v in range(1, count + 1)
                            ],
                        }
                        for c, count in enumerate(chapters, start=1)
                    ],
                }
                for book, chapters in books
            ],
        })
    return Corpus.from_data(data)


@pytest.fixture
def small_corpus() -> Corpus:
    """Testament A {Genesis: 2 chapters}, Testament B {Exodus: 1 chapter}."""
    return make_corpus([
        ("A", [("Genesis", [3, 2])]),
        ("B", [("Exodus", [4])]),
    ])


@pytest.fixture
def wide_corpus() -> Corpus:
    """Several books per testament, for boundary walks."""
    return make_corpus([
        ("A", [("Genesis", [2, 2, 1]), ("Exodus", [1]), ("Leviticus", [2, 3])]),
        ("B", [("Matthew", [1, 1]), ("Mark", [2])]),
        ("C", [("Jude", [3])]),
    ])


@pytest.fixture
def arabic_corpus() -> Corpus:
    return Corpus.from_data([
        {
            "name": "العهد",
            "books": [
                {
                    "name": "سفر",
                    "chapters": [
                        {
                            "number": 1,
                            "verses": [
                                {"number": 1, "text": "اللّٰه"},
                                {"number": 2, "text": "كتاب مفتوح"},
                                {"number": 3, "text": "قَالَ اللهُ [لِيَكُنْ] نُورٌ"},
                                {"number": 4, "text": "الكتب كثيرة"},
                            ],
                        },
                        {
                            "number": 2,
                            "verses": [
                                {"number": 1, "text": "إلى الأرض"},
                                {"number": 2, "text": "مدينة الله"},
                            ],
                        },
                    ],
                }
            ],
        }
    ])


@pytest.fixture
def memory_backend() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(memory_backend) -> HistoryStore:
    return HistoryStore(memory_backend)


class FakeTimer:
    """Stand-in for textual.timer.Timer."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeScheduler:
    """Collects timers; tests fire them explicitly."""

    def __init__(self) -> None:
        self.timers: List[FakeTimer] = []

    def set_timer(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.stopped]

    def fire_all(self) -> None:
        """Run every timer that has not been stopped."""
        for timer in self.live:
            timer.stopped = True
            timer.callback()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


class CountingClock:
    """Deterministic clock returning 1, 2, 3, ..."""

    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def clock() -> CountingClock:
    return CountingClock()


class RecordingBackend(MemoryStore):
    """MemoryStore that logs every write."""

    def __init__(self, data=None) -> None:
        super().__init__(data)
        self.writes: List[Tuple[str, object]] = []

    def set(self, key, value) -> None:
        self.writes.append((key, value))
        super().set(key, value)
