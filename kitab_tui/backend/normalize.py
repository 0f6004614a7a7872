"""Arabic text normalization for diacritic-insensitive matching."""

import unicodedata
from typing import List, Tuple

# Letter variants folded to a base letter
_FOLD = {
    "آ": "ا",  # alef with madda
    "أ": "ا",  # alef with hamza above
    "إ": "ا",  # alef with hamza below
    "ٱ": "ا",  # alef wasla
    "ؤ": "و",  # waw with hamza above
    "ئ": "ي",  # yeh with hamza above
    "ى": "ي",  # alef maqsura -> yeh
    "ة": "ه",  # teh marbuta -> heh
}

_TATWEEL = "ـ"
_SUPERSCRIPT_ALEF = "ٰ"


def is_diacritic(ch: str) -> bool:
    """True for marks that are dropped before comparison."""
    cp = ord(ch)
    return (
        0x064B <= cp <= 0x065F  # harakat, tanwin, shadda, sukun
        or ch == _SUPERSCRIPT_ALEF
        or 0x06D6 <= cp <= 0x06ED  # Quranic annotation marks
        or ch == _TATWEEL
    )


def is_mark(ch: str) -> bool:
    """True for any character that attaches to the preceding letter."""
    return is_diacritic(ch) or unicodedata.combining(ch) != 0


def normalize_with_offsets(text: str) -> Tuple[str, List[int]]:
    """Normalize text and map every output character back to its source.

    Returns:
        (normalized, offsets) where offsets[i] is the index in text of the
        character normalized[i] came from.
    """
    chars: List[str] = []
    offsets: List[int] = []
    for i, ch in enumerate(text):
        if is_diacritic(ch):
            continue
        folded = _FOLD.get(ch)
        if folded is None:
            folded = ch.lower()
        for out in folded:
            chars.append(out)
            offsets.append(i)
    return "".join(chars), offsets


def normalize(text: str) -> str:
    """Fold diacritics and letter variants so equivalent text compares equal."""
    return normalize_with_offsets(text)[0]
