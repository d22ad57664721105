"""Bible book metadata used to anchor a new passage's first word id."""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from outline_api.config import get_settings

logger = logging.getLogger(__name__)


class BibleMetadata:
    """Lookup of testament/book records (abbreviation, title, chapter count).

    Loaded once per process and handed to the services that need it.
    """

    def __init__(self, testaments: List[Dict[str, Any]]):
        self._books: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for testament in testaments:
            testament_id = testament.get("_id")
            if not testament_id:
                continue
            self._books[testament_id] = {
                book["_id"]: book for book in testament.get("bookData", []) if book.get("_id")
            }

    @classmethod
    def from_file(cls, path: str) -> "BibleMetadata":
        with Path(path).open(encoding="utf-8") as handle:
            data = json.load(handle)
        testaments = data.get("testamentData") if isinstance(data, dict) else None
        if not isinstance(testaments, list):
            raise ValueError(f"Invalid testament data structure in {path}")
        logger.info(f"Loaded Bible metadata for {len(testaments)} testaments from {path}")
        return cls(testaments)

    def get_book(self, testament_id: str, book_id: str) -> Optional[Dict[str, Any]]:
        return self._books.get(testament_id, {}).get(book_id)

    def book_abbreviation(self, testament_id: str, book_id: str) -> Optional[str]:
        book = self.get_book(testament_id, book_id)
        return book.get("abbreviation") if book else None

    def book_title(self, testament_id: str, book_id: str) -> Optional[str]:
        book = self.get_book(testament_id, book_id)
        return book.get("title") if book else None

    def chapter_count(self, testament_id: str, book_id: str) -> Optional[int]:
        book = self.get_book(testament_id, book_id)
        if not book or not isinstance(book.get("chapterCount"), int):
            return None
        return book["chapterCount"]


@lru_cache(maxsize=1)
def get_bible_metadata() -> BibleMetadata:
    """Process-wide metadata instance loaded from the configured JSON file."""
    settings = get_settings()
    return BibleMetadata.from_file(settings.bible_data_path)
