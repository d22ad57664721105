"""Repository for passage columns, sections and segments.

Every method takes the cursor of the caller's transaction so a structure
mutation reads and writes through a single unit of work.
"""
import uuid
from typing import Any, Dict, List, Optional, Sequence

COLUMN_FIELDS = "id, passage_id, starting_word_id, created_at, updated_at"
SECTION_FIELDS = "id, passage_column_id, starting_word_id, color, created_at, updated_at"
SEGMENT_FIELDS = (
    "id, passage_section_id, starting_word_id, heading_one, heading_two, heading_three, "
    "note, commentary, created_at, updated_at"
)

SEGMENT_TEXT_FIELDS = ("heading_one", "heading_two", "heading_three", "note", "commentary")


def _new_id() -> str:
    return str(uuid.uuid4())


class StructureRepository:
    """Repository for the three outline tiers of a passage."""

    # Columns

    @staticmethod
    def list_columns(cur, passage_id: str) -> List[Dict[str, Any]]:
        cur.execute(
            f"""
            SELECT {COLUMN_FIELDS}
            FROM passage_column
            WHERE passage_id = %s
            ORDER BY starting_word_id ASC
            """,
            (passage_id,),
        )
        return cur.fetchall()

    @staticmethod
    def get_column(cur, column_id: str) -> Optional[Dict[str, Any]]:
        cur.execute(
            f"SELECT {COLUMN_FIELDS} FROM passage_column WHERE id = %s LIMIT 1",
            (column_id,),
        )
        return cur.fetchone()

    @staticmethod
    def create_column(cur, passage_id: str, starting_word_id: str) -> Dict[str, Any]:
        cur.execute(
            f"""
            INSERT INTO passage_column (id, passage_id, starting_word_id)
            VALUES (%s, %s, %s)
            RETURNING {COLUMN_FIELDS}
            """,
            (_new_id(), passage_id, starting_word_id),
        )
        return cur.fetchone()

    # Sections

    @staticmethod
    def list_sections(cur, column_id: str) -> List[Dict[str, Any]]:
        cur.execute(
            f"""
            SELECT {SECTION_FIELDS}
            FROM passage_section
            WHERE passage_column_id = %s
            ORDER BY starting_word_id ASC
            """,
            (column_id,),
        )
        return cur.fetchall()

    @staticmethod
    def get_section(cur, section_id: str) -> Optional[Dict[str, Any]]:
        cur.execute(
            f"SELECT {SECTION_FIELDS} FROM passage_section WHERE id = %s LIMIT 1",
            (section_id,),
        )
        return cur.fetchone()

    @staticmethod
    def create_section(cur, column_id: str, starting_word_id: str, color: str) -> Dict[str, Any]:
        cur.execute(
            f"""
            INSERT INTO passage_section (id, passage_column_id, starting_word_id, color)
            VALUES (%s, %s, %s, %s)
            RETURNING {SECTION_FIELDS}
            """,
            (_new_id(), column_id, starting_word_id, color),
        )
        return cur.fetchone()

    @staticmethod
    def transfer_sections(cur, section_ids: Sequence[str], new_column_id: str) -> int:
        """Re-parent sections under another column, keeping their word ids."""
        if not section_ids:
            return 0
        cur.execute(
            """
            UPDATE passage_section
            SET passage_column_id = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = ANY(%s)
            """,
            (new_column_id, list(section_ids)),
        )
        return cur.rowcount

    @staticmethod
    def update_column_color(cur, column_id: str, color: str) -> int:
        cur.execute(
            """
            UPDATE passage_section
            SET color = %s, updated_at = CURRENT_TIMESTAMP
            WHERE passage_column_id = %s
            """,
            (color, column_id),
        )
        return cur.rowcount

    # Segments

    @staticmethod
    def list_segments(cur, section_id: str) -> List[Dict[str, Any]]:
        cur.execute(
            f"""
            SELECT {SEGMENT_FIELDS}
            FROM passage_segment
            WHERE passage_section_id = %s
            ORDER BY starting_word_id ASC
            """,
            (section_id,),
        )
        return cur.fetchall()

    @staticmethod
    def get_segment(cur, segment_id: str) -> Optional[Dict[str, Any]]:
        cur.execute(
            f"SELECT {SEGMENT_FIELDS} FROM passage_segment WHERE id = %s LIMIT 1",
            (segment_id,),
        )
        return cur.fetchone()

    @staticmethod
    def create_segment(cur, section_id: str, starting_word_id: str) -> Dict[str, Any]:
        cur.execute(
            f"""
            INSERT INTO passage_segment (id, passage_section_id, starting_word_id)
            VALUES (%s, %s, %s)
            RETURNING {SEGMENT_FIELDS}
            """,
            (_new_id(), section_id, starting_word_id),
        )
        return cur.fetchone()

    @staticmethod
    def transfer_segments(cur, segment_ids: Sequence[str], new_section_id: str) -> int:
        """Re-parent segments under another section, keeping their word ids."""
        if not segment_ids:
            return 0
        cur.execute(
            """
            UPDATE passage_segment
            SET passage_section_id = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = ANY(%s)
            """,
            (new_section_id, list(segment_ids)),
        )
        return cur.rowcount

    @staticmethod
    def update_segment_field(cur, segment_id: str, field: str, value: Optional[str]) -> bool:
        if field not in SEGMENT_TEXT_FIELDS:
            raise ValueError(f"Unknown segment field: {field}")
        cur.execute(
            f"""
            UPDATE passage_segment
            SET {field} = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
            """,
            (value, segment_id),
        )
        return cur.rowcount > 0

    @staticmethod
    def get_segment_owner_id(cur, segment_id: str) -> Optional[Dict[str, Any]]:
        """Resolve segment -> section -> column -> passage -> study owner."""
        cur.execute(
            """
            SELECT seg.id AS segment_id, p.id AS passage_id, s.user_id
            FROM passage_segment seg
            JOIN passage_section sec ON sec.id = seg.passage_section_id
            JOIN passage_column col ON col.id = sec.passage_column_id
            JOIN passage p ON p.id = col.passage_id
            JOIN study s ON s.id = p.study_id
            WHERE seg.id = %s
            LIMIT 1
            """,
            (segment_id,),
        )
        return cur.fetchone()

    @staticmethod
    def get_column_owner_id(cur, column_id: str) -> Optional[Dict[str, Any]]:
        """Resolve column -> passage -> study owner."""
        cur.execute(
            """
            SELECT col.id AS column_id, p.id AS passage_id, s.user_id
            FROM passage_column col
            JOIN passage p ON p.id = col.passage_id
            JOIN study s ON s.id = p.study_id
            WHERE col.id = %s
            LIMIT 1
            """,
            (column_id,),
        )
        return cur.fetchone()
