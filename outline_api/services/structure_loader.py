"""Assembles the nested column -> section -> segment tree of a passage."""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List

import psycopg2

from outline_api.database import get_db_connection
from outline_api.models.structure import (
    PassageColumn,
    column_from_row,
    section_from_row,
    segment_from_row,
)
from outline_api.repositories.passage import PassageRepository
from outline_api.repositories.structure import StructureRepository
from outline_api.utils.exceptions import DatabaseError, ForbiddenError, NotFoundError
from outline_api.utils.word_id import sort_by_word_id

logger = logging.getLogger(__name__)


def build_structure(cur, passage_id: str) -> List[PassageColumn]:
    """Read the full tree of one passage through ``cur``.

    The store orders rows by their text word id; every level is re-sorted
    with the word id comparator so ordering never depends on collation.
    """
    columns = []
    for column_row in StructureRepository.list_columns(cur, passage_id):
        column = column_from_row(column_row)
        sections = []
        for section_row in StructureRepository.list_sections(cur, column.id):
            section = section_from_row(section_row)
            section.segments = sort_by_word_id(
                segment_from_row(row) for row in StructureRepository.list_segments(cur, section.id)
            )
            sections.append(section)
        column.sections = sort_by_word_id(sections)
        columns.append(column)
    return sort_by_word_id(columns)


@contextmanager
def _read_cursor(action: str):
    try:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                yield cur
    except psycopg2.Error as exc:
        logger.error(f"Database error while loading {action}: {exc}")
        raise DatabaseError(f"Failed to load {action}") from exc


class StructureLoader:
    """Read side of the outline engine."""

    def load_structure(self, passage_id: str) -> List[PassageColumn]:
        with _read_cursor("structure") as cur:
            columns = build_structure(cur, passage_id)
        if not columns:
            logger.warning(f"Passage {passage_id} has no structure")
        return columns

    def load_passage_structure(self, *, passage_id: str, user_id: Any) -> List[PassageColumn]:
        """Load one passage's tree after checking the caller owns it."""
        with _read_cursor("passage structure") as cur:
            owner_id = PassageRepository.get_passage_owner_id(cur, passage_id)
            if owner_id is None:
                raise NotFoundError("Passage not found")
            if owner_id != user_id:
                raise ForbiddenError("You do not have permission to view this passage")
            return build_structure(cur, passage_id)

    def load_study_structure(self, *, study_id: str, user_id: Any) -> Dict[str, Any]:
        """Load a study with every passage's tree, ordered by display order."""
        with _read_cursor("study") as cur:
            study = PassageRepository.get_study(cur, study_id)
            if not study:
                raise NotFoundError("Study not found")
            if study["user_id"] != user_id:
                raise ForbiddenError("You do not have permission to view this study")

            passages = []
            for passage in PassageRepository.list_passages(cur, study_id):
                passages.append(
                    {
                        **passage,
                        "structure": {
                            "passage_id": passage["id"],
                            "columns": build_structure(cur, passage["id"]),
                        },
                    }
                )
        return {"study": study, "passages": passages}


def get_structure_loader() -> StructureLoader:
    return StructureLoader()
