"""Finds the column, section and segment that currently hold a word id.

Columns are matched with a strict lower bound: a new column may never start
where a column already starts. Sections and segments use an inclusive lower
bound because a child may legitimately begin exactly where its parent does.
Upper bounds are always the next sibling's start, or unbounded for the last
sibling.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from outline_api.models.structure import PassageColumn, PassageSection, PassageSegment
from outline_api.utils.exceptions import BoundaryError, InvalidInsertionPointError
from outline_api.utils.word_id import compare_word_ids, sort_by_word_id

logger = logging.getLogger(__name__)

COLUMN_BOUNDARY_MESSAGE = "Cannot insert column at the beginning of an existing column"


@dataclass(frozen=True)
class Location:
    column: PassageColumn
    section: PassageSection
    segment: PassageSegment


def _next_start(items: Sequence, index: int) -> Optional[str]:
    if index + 1 < len(items):
        return items[index + 1].starting_word_id
    return None


def _before_upper_bound(word_id: str, upper: Optional[str]) -> bool:
    return upper is None or compare_word_ids(word_id, upper) < 0


def _find_inclusive(items: List, word_id: str):
    for index, item in enumerate(items):
        if compare_word_ids(item.starting_word_id, word_id) <= 0 and _before_upper_bound(
            word_id, _next_start(items, index)
        ):
            return item
    return None


def find_column(columns: Sequence[PassageColumn], word_id: str) -> PassageColumn:
    """Return the column whose interior strictly contains ``word_id``."""
    ordered = sort_by_word_id(columns)
    for index, column in enumerate(ordered):
        position = compare_word_ids(word_id, column.starting_word_id)
        if position == 0:
            raise BoundaryError(COLUMN_BOUNDARY_MESSAGE)
        if position > 0 and _before_upper_bound(word_id, _next_start(ordered, index)):
            return column
    logger.error(f"No column contains insertion word {word_id}")
    raise InvalidInsertionPointError("Invalid insertion point")


def ensure_within_column(columns: Sequence[PassageColumn], column: PassageColumn, word_id: str) -> None:
    """Reject ``word_id`` when it lies at or past the start of the column after ``column``."""
    ordered = sort_by_word_id(columns)
    index = next(i for i, item in enumerate(ordered) if item.id == column.id)
    upper = _next_start(ordered, index)
    if not _before_upper_bound(word_id, upper):
        logger.error(f"Insertion word {word_id} lies past column {column.id}, which ends before {upper}")
        raise InvalidInsertionPointError("Invalid insertion point")


def find_section(column: PassageColumn, word_id: str) -> PassageSection:
    section = _find_inclusive(sort_by_word_id(column.sections), word_id)
    if section is None:
        logger.error(f"No section of column {column.id} contains insertion word {word_id}")
        raise InvalidInsertionPointError("Invalid insertion point")
    return section


def find_segment(section: PassageSection, word_id: str) -> PassageSegment:
    segment = _find_inclusive(sort_by_word_id(section.segments), word_id)
    if segment is None:
        logger.error(f"No segment of section {section.id} contains insertion word {word_id}")
        raise InvalidInsertionPointError("Invalid insertion point")
    return segment


def locate(structure: Sequence[PassageColumn], insertion_word_id: str) -> Location:
    """Place ``insertion_word_id`` inside a passage tree.

    Raises:
        BoundaryError: the word id is the start of an existing column.
        InvalidInsertionPointError: no column/section/segment contains it.
    """
    column = find_column(structure, insertion_word_id)
    section = find_section(column, insertion_word_id)
    segment = find_segment(section, insertion_word_id)
    return Location(column=column, section=section, segment=segment)
