"""Word identifiers anchoring outline boundaries to the canonical text.

A word id has the shape ``BOOK-CHAPTER-VERSE-WORD`` (``JN-003-016-001``).
Chapter, verse and word are zero padded to three digits. The book part is
not compared: every id handled together belongs to the same passage.
"""
import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, List, Optional, Union

from outline_api.utils.exceptions import ValidationError

WORD_ID_PATTERN = re.compile(r"^([A-Z0-9]+)-(\d{3})-(\d{3})-(\d{3})$")


def _numeric_parts(word_id: str) -> List[int]:
    parts = str(word_id).split("-")
    return [int(part) for part in parts[1:4]]


def compare_word_ids(a: Optional[str], b: Optional[str]) -> int:
    """Compare two word ids by chapter, verse then word number.

    Returns a negative number when ``a`` precedes ``b``, positive when it
    follows, and 0 when they are equal or when either id is empty.
    """
    if not a or not b:
        return 0

    for left, right in zip(_numeric_parts(a), _numeric_parts(b)):
        if left != right:
            return left - right
    return 0


word_id_sort_key = cmp_to_key(compare_word_ids)


def sort_by_word_id(items: Iterable, attr: str = "starting_word_id") -> list:
    """Return ``items`` ordered ascending by their starting word id."""
    return sorted(items, key=lambda item: word_id_sort_key(getattr(item, attr)))


def format_word_id(book: str, chapter: int, verse: int, word: int = 1) -> str:
    """Build a word id string from its components."""
    return f"{book.upper()}-{chapter:03d}-{verse:03d}-{word:03d}"


@dataclass(frozen=True)
class WordId:
    """Parsed, immutable word id. Ordering goes through ``compare_word_ids``."""

    book: str
    chapter: int
    verse: int
    word: int

    @classmethod
    def parse(cls, value: Union[str, "WordId"]) -> "WordId":
        if isinstance(value, WordId):
            return value
        match = WORD_ID_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if not match:
            raise ValidationError(f"Invalid word id: {value!r}")
        book, chapter, verse, word = match.groups()
        return cls(book=book, chapter=int(chapter), verse=int(verse), word=int(word))

    def __str__(self) -> str:
        return format_word_id(self.book, self.chapter, self.verse, self.word)


def normalize_word_id(value: Union[str, WordId]) -> str:
    """Validate a client supplied word id and return its canonical string."""
    return str(WordId.parse(value))
