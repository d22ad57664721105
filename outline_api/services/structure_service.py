"""Business logic for editing a passage outline.

Each public operation runs inside one database transaction. Inserting a
boundary creates the new column/section/segment at the insertion word and
moves every existing child that starts at or after that word under the new
parent. Children keep their own starting word ids when they move.
"""
from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

import psycopg2

from outline_api.config import Settings, get_settings
from outline_api.database import transaction
from outline_api.models.structure import (
    HeadingType,
    PassageColumn,
    PassageSection,
    PassageSegment,
    SectionColor,
    segment_from_row,
)
from outline_api.repositories.passage import PassageRepository
from outline_api.repositories.structure import StructureRepository
from outline_api.services.bible_metadata import BibleMetadata, get_bible_metadata
from outline_api.services.insertion_locator import (
    ensure_within_column,
    find_section,
    find_segment,
    locate,
)
from outline_api.services.structure_loader import build_structure
from outline_api.utils.exceptions import (
    BoundaryError,
    DatabaseError,
    ForbiddenError,
    InvalidInsertionPointError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from outline_api.utils.word_id import compare_word_ids, format_word_id, normalize_word_id

logger = logging.getLogger(__name__)

TESTAMENTS = ("OT", "NT")

NON_BOOK_CODE = re.compile(r"[^A-Z0-9]")


def _starts_at_or_after(items, word_id: str) -> List[str]:
    return [item.id for item in items if compare_word_ids(item.starting_word_id, word_id) >= 0]


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value if value.strip() else None


def _book_code(book_id: str) -> str:
    """Upper-case ``book_id`` reduced to the characters a word id allows."""
    return NON_BOOK_CODE.sub("", book_id.upper())


@contextmanager
def _unit_of_work(action: str):
    """Run one operation in a transaction, reporting driver failures as ``DatabaseError``."""
    try:
        with transaction() as cur:
            yield cur
    except psycopg2.Error as exc:
        logger.error(f"Database error during {action}: {exc}")
        raise DatabaseError(f"Failed to {action}") from exc


class StructureService:
    """Coordinates outline mutations for a user's passages."""

    def __init__(self, bible_metadata: BibleMetadata, settings: Optional[Settings] = None):
        self.bible_metadata = bible_metadata
        self.settings = settings or get_settings()

    # Insertions

    def insert_column(
        self,
        *,
        passage_id: str,
        column_id: str,
        section_id: str,
        segment_id: str,
        insertion_word_id: str,
        user_id: Any,
    ) -> str:
        word_id = normalize_word_id(insertion_word_id)

        with _unit_of_work("insert column") as cur:
            self._authorize_passage(cur, passage_id, user_id)
            column_row, _, _ = self._resolve_context(
                cur, passage_id, column_id, section_id, segment_id
            )
            if compare_word_ids(word_id, column_row["starting_word_id"]) == 0:
                raise BoundaryError("Cannot insert column at the beginning of an existing column")

            location = locate(build_structure(cur, passage_id), word_id)
            self._ensure_location_matches(
                word_id,
                (location.column, column_id),
                (location.section, section_id),
                (location.segment, segment_id),
            )
            column, section, segment = location.column, location.section, location.segment

            new_column = StructureRepository.create_column(cur, passage_id, word_id)

            if compare_word_ids(word_id, section.starting_word_id) != 0:
                new_section = StructureRepository.create_section(
                    cur, new_column["id"], word_id, section.color.value
                )
                self._split_section(cur, section, segment, new_section["id"], word_id)

            # The new section above was created under the new column and is
            # not part of this snapshot, so only pre-existing sections move.
            moved_sections = StructureRepository.transfer_sections(
                cur, _starts_at_or_after(column.sections, word_id), new_column["id"]
            )

        logger.info(
            f"Inserted column {new_column['id']} at {word_id} in passage {passage_id} "
            f"(moved {moved_sections} sections)"
        )
        return new_column["id"]

    def insert_section(
        self,
        *,
        passage_id: str,
        column_id: str,
        section_id: str,
        segment_id: str,
        insertion_word_id: str,
        user_id: Any,
    ) -> str:
        word_id = normalize_word_id(insertion_word_id)

        with _unit_of_work("insert section") as cur:
            self._authorize_passage(cur, passage_id, user_id)
            _, section_row, _ = self._resolve_context(cur, passage_id, column_id, section_id, segment_id)
            if compare_word_ids(word_id, section_row["starting_word_id"]) == 0:
                raise BoundaryError("Cannot insert section at the beginning of an existing section")

            structure = build_structure(cur, passage_id)
            column = self._column_from_tree(structure, column_id)
            ensure_within_column(structure, column, word_id)
            section = find_section(column, word_id)
            segment = find_segment(section, word_id)
            self._ensure_location_matches(word_id, (section, section_id), (segment, segment_id))

            new_section = StructureRepository.create_section(cur, column_id, word_id, section.color.value)
            self._split_section(cur, section, segment, new_section["id"], word_id)

        logger.info(f"Inserted section {new_section['id']} at {word_id} in column {column_id}")
        return new_section["id"]

    def insert_segment(
        self,
        *,
        passage_id: str,
        section_id: str,
        insertion_word_id: str,
        user_id: Any,
    ) -> str:
        word_id = normalize_word_id(insertion_word_id)

        with _unit_of_work("insert segment") as cur:
            self._authorize_passage(cur, passage_id, user_id)
            section_row = StructureRepository.get_section(cur, section_id)
            column_row = (
                StructureRepository.get_column(cur, section_row["passage_column_id"]) if section_row else None
            )
            if not column_row or column_row["passage_id"] != passage_id:
                raise NotFoundError("Section not found or does not belong to this passage")

            if compare_word_ids(word_id, section_row["starting_word_id"]) == 0:
                raise BoundaryError("Cannot insert segment at the beginning of a section")

            structure = build_structure(cur, passage_id)
            column = self._column_from_tree(structure, column_row["id"])
            ensure_within_column(structure, column, word_id)
            section = next((item for item in column.sections if item.id == section_id), None)
            if section is None:
                raise NotFoundError("Section not found or does not belong to this passage")
            if any(compare_word_ids(word_id, seg.starting_word_id) == 0 for seg in section.segments):
                raise BoundaryError("Cannot insert segment at the beginning of an existing segment")
            self._ensure_location_matches(word_id, (find_section(column, word_id), section_id))

            new_segment = StructureRepository.create_segment(cur, section_id, word_id)

        logger.info(f"Inserted segment {new_segment['id']} at {word_id} in section {section_id}")
        return new_segment["id"]

    # Segment text

    def get_segment(self, *, segment_id: str, user_id: Any) -> PassageSegment:
        with _unit_of_work("load segment") as cur:
            self._authorize_segment(cur, segment_id, user_id)
            return segment_from_row(StructureRepository.get_segment(cur, segment_id))

    def update_segment_heading(
        self,
        *,
        segment_id: str,
        heading_type: str,
        heading_text: Optional[str],
        user_id: Any,
    ) -> None:
        try:
            heading = HeadingType(heading_type)
        except ValueError as err:
            raise ValidationError("Invalid headingType. Must be one, two, or three") from err

        self._update_segment_text(segment_id, heading.column_name, heading_text, user_id)

    def update_segment_note(self, *, segment_id: str, note_text: Optional[str], user_id: Any) -> None:
        limit = self.settings.note_max_length
        if note_text and len(note_text) > limit:
            raise ValidationError(f"Note exceeds {limit} character limit")

        self._update_segment_text(segment_id, "note", note_text, user_id)

    def update_segment_commentary(
        self, *, segment_id: str, commentary: Optional[str], user_id: Any
    ) -> None:
        self._update_segment_text(segment_id, "commentary", commentary, user_id)

    # Colour

    def set_column_color(self, *, column_id: str, color: str, user_id: Any) -> int:
        """Broadcast ``color`` to every section of a column.

        Individually recoloured sections are overwritten.
        """
        if color not in SectionColor.values():
            raise ValidationError("Invalid color. Must be one of: " + ", ".join(SectionColor.values()))

        with _unit_of_work("update column color") as cur:
            owner = StructureRepository.get_column_owner_id(cur, column_id)
            if not owner:
                raise NotFoundError("Column not found")
            if owner["user_id"] != user_id:
                raise UnauthorizedError("Unauthorized")
            updated = StructureRepository.update_column_color(cur, column_id, color)

        logger.info(f"Recolored {updated} sections of column {column_id} to {color}")
        return updated

    # Passage creation

    def first_word_id(self, testament_id: str, book_id: str, from_chapter: int, from_verse: int) -> str:
        abbreviation = None
        try:
            abbreviation = self.bible_metadata.book_abbreviation(testament_id, book_id)
        except Exception as e:
            logger.warning(f"Book metadata lookup failed for {testament_id}/{book_id}: {e}")
        if not abbreviation:
            logger.warning(f"No abbreviation for {testament_id}/{book_id}, using book id")
            abbreviation = _book_code(book_id)
            if not abbreviation:
                raise ValidationError(f"Invalid book id: {book_id!r}")
        return format_word_id(abbreviation, from_chapter, from_verse, 1)

    def create_default_passage_structure(
        self,
        passage_id: str,
        testament_id: str,
        book_id: str,
        from_chapter: int,
        from_verse: int,
        cur=None,
    ) -> Dict[str, Any]:
        """Create the single column, section and segment every passage starts with.

        Runs on ``cur`` when given so callers can bootstrap inside their own
        transaction; otherwise opens one.
        """
        if cur is None:
            with _unit_of_work("create passage structure") as tx_cur:
                return self.create_default_passage_structure(
                    passage_id, testament_id, book_id, from_chapter, from_verse, cur=tx_cur
                )

        word_id = self.first_word_id(testament_id, book_id, from_chapter, from_verse)
        column = StructureRepository.create_column(cur, passage_id, word_id)
        section = StructureRepository.create_section(
            cur, column["id"], word_id, self.settings.default_section_color
        )
        segment = StructureRepository.create_segment(cur, section["id"], word_id)
        logger.info(f"Created default structure for passage {passage_id} at {word_id}")
        return {"column": column, "section": section, "segment": segment}

    def create_passage(
        self,
        *,
        study_id: str,
        testament: str,
        book_id: str,
        from_chapter: int,
        to_chapter: int,
        from_verse: int,
        to_verse: int,
        user_id: Any,
    ) -> Dict[str, Any]:
        fields = dict(
            testament=testament,
            book_id=book_id,
            from_chapter=from_chapter,
            to_chapter=to_chapter,
            from_verse=from_verse,
            to_verse=to_verse,
        )
        self._validate_passage_range(**fields)

        with _unit_of_work("create passage") as cur:
            study = PassageRepository.get_study(cur, study_id)
            if not study:
                raise NotFoundError("Study not found")
            if study["user_id"] != user_id:
                raise UnauthorizedError("Unauthorized")

            created = self._insert_passage(
                cur, study_id, PassageRepository.next_display_order(cur, study_id), fields
            )

        return created

    # Studies

    def create_study(
        self,
        *,
        title: str,
        subtitle: Optional[str] = None,
        passages: List[Dict[str, Any]],
        user_id: Any,
    ) -> Dict[str, Any]:
        """Create a study with its passages, each bootstrapped with the default outline.

        Passages keep the order they were given in.
        """
        title = self._clean_title(title)
        if not passages:
            raise ValidationError("At least one passage is required")
        for fields in passages:
            self._validate_passage_range(**fields)

        with _unit_of_work("create study") as cur:
            study = PassageRepository.create_study(cur, title, _clean_text(subtitle), user_id)
            created = [
                self._insert_passage(cur, study["id"], display_order, fields)
                for display_order, fields in enumerate(passages)
            ]

        logger.info(f"Created study {study['id']} with {len(created)} passages for user {user_id}")
        return {"study": study, "passages": created}

    def update_study(
        self,
        *,
        study_id: str,
        title: str,
        subtitle: Optional[str] = None,
        user_id: Any,
    ) -> Dict[str, Any]:
        title = self._clean_title(title)

        with _unit_of_work("update study") as cur:
            study = PassageRepository.get_study(cur, study_id)
            # Studies of other users are reported as missing.
            if not study or study["user_id"] != user_id:
                raise NotFoundError("Study not found")
            updated = PassageRepository.update_study(cur, study_id, title, _clean_text(subtitle))

        logger.info(f"Updated study {study_id}")
        return updated

    # Helpers

    def _split_section(
        self,
        cur,
        section: PassageSection,
        segment: PassageSegment,
        new_section_id: str,
        word_id: str,
    ) -> int:
        """Give a freshly created section its share of ``section``'s segments."""
        if compare_word_ids(word_id, segment.starting_word_id) != 0:
            StructureRepository.create_segment(cur, new_section_id, word_id)
        return StructureRepository.transfer_segments(
            cur, _starts_at_or_after(section.segments, word_id), new_section_id
        )

    def _insert_passage(self, cur, study_id: str, display_order: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one passage row and its default outline on ``cur``."""
        book_name = self.bible_metadata.book_title(fields["testament"], fields["book_id"]) or fields["book_id"]
        passage = PassageRepository.create_passage(
            cur, study_id=study_id, book_name=book_name, display_order=display_order, **fields
        )
        structure = self.create_default_passage_structure(
            passage["id"], fields["testament"], fields["book_id"],
            fields["from_chapter"], fields["from_verse"], cur=cur,
        )
        return {"passage": passage, "structure": structure}

    @staticmethod
    def _clean_title(title: Optional[str]) -> str:
        if not title or not title.strip():
            raise ValidationError("Title is required")
        return title.strip()

    @staticmethod
    def _authorize_passage(cur, passage_id: str, user_id: Any) -> None:
        owner_id = PassageRepository.get_passage_owner_id(cur, passage_id, for_update=True)
        if owner_id is None:
            raise NotFoundError("Passage not found")
        if owner_id != user_id:
            raise UnauthorizedError("Unauthorized")

    @staticmethod
    def _authorize_segment(cur, segment_id: str, user_id: Any) -> None:
        owner = StructureRepository.get_segment_owner_id(cur, segment_id)
        if not owner:
            raise NotFoundError("Segment not found")
        if owner["user_id"] != user_id:
            raise ForbiddenError("User not authorized to update this segment")

    def _update_segment_text(self, segment_id: str, field: str, value: Optional[str], user_id: Any) -> None:
        with _unit_of_work(f"update segment {field}") as cur:
            self._authorize_segment(cur, segment_id, user_id)
            StructureRepository.update_segment_field(cur, segment_id, field, _clean_text(value))
        logger.info(f"Updated {field} of segment {segment_id}")

    @staticmethod
    def _resolve_context(
        cur, passage_id: str, column_id: str, section_id: str, segment_id: str
    ) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
        column = StructureRepository.get_column(cur, column_id)
        if not column or column["passage_id"] != passage_id:
            raise NotFoundError("Column not found or does not belong to this passage")

        section = StructureRepository.get_section(cur, section_id)
        if not section or section["passage_column_id"] != column_id:
            raise NotFoundError("Section not found or does not belong to this passage")

        segment = StructureRepository.get_segment(cur, segment_id)
        if not segment or segment["passage_section_id"] != section_id:
            raise NotFoundError("Segment not found or does not belong to this passage")

        return column, section, segment

    @staticmethod
    def _column_from_tree(structure: List[PassageColumn], column_id: str) -> PassageColumn:
        for column in structure:
            if column.id == column_id:
                return column
        raise NotFoundError("Column not found or does not belong to this passage")

    @staticmethod
    def _ensure_location_matches(word_id: str, *pairs) -> None:
        """Reject a word id that lies outside the entities the caller named."""
        for located, expected_id in pairs:
            if located.id != expected_id:
                logger.error(
                    f"Insertion word {word_id} falls in {located.id}, caller named {expected_id}"
                )
                raise InvalidInsertionPointError("Invalid insertion point")

    def _validate_passage_range(
        self,
        testament: str,
        book_id: str,
        from_chapter: int,
        to_chapter: int,
        from_verse: int,
        to_verse: int,
    ) -> None:
        if testament not in TESTAMENTS:
            raise ValidationError("testament must be OT or NT")
        if not book_id:
            raise ValidationError("book_id is required")
        if not _book_code(book_id):
            raise ValidationError(f"Invalid book id: {book_id!r}")
        if from_chapter < 1 or to_chapter < from_chapter:
            raise ValidationError("Invalid chapter range")
        if from_verse < 1 or to_verse < 1 or (from_chapter == to_chapter and to_verse < from_verse):
            raise ValidationError("Invalid verse range")
        chapter_count = self.bible_metadata.chapter_count(testament, book_id)
        if chapter_count is not None and to_chapter > chapter_count:
            raise ValidationError(f"{book_id} has only {chapter_count} chapters")


def get_structure_service() -> StructureService:
    return StructureService(get_bible_metadata())
