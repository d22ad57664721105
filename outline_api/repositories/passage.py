"""Repository for studies and the passages they own."""
import uuid
from typing import Any, Dict, List, Optional

STUDY_FIELDS = "id, title, subtitle, user_id, created_at, updated_at"

PASSAGE_FIELDS = (
    "id, study_id, testament, book_id, book_name, from_chapter, to_chapter, "
    "from_verse, to_verse, display_order, created_at"
)


class PassageRepository:
    """Repository for studies and passages."""

    @staticmethod
    def get_study(cur, study_id: str) -> Optional[Dict[str, Any]]:
        cur.execute(
            f"SELECT {STUDY_FIELDS} FROM study WHERE id = %s LIMIT 1",
            (study_id,),
        )
        return cur.fetchone()

    @staticmethod
    def create_study(cur, title: str, subtitle: Optional[str], user_id: Any) -> Dict[str, Any]:
        cur.execute(
            f"""
            INSERT INTO study (id, title, subtitle, user_id)
            VALUES (%s, %s, %s, %s)
            RETURNING {STUDY_FIELDS}
            """,
            (str(uuid.uuid4()), title, subtitle, user_id),
        )
        return cur.fetchone()

    @staticmethod
    def update_study(cur, study_id: str, title: str, subtitle: Optional[str]) -> Optional[Dict[str, Any]]:
        cur.execute(
            f"""
            UPDATE study
            SET title = %s, subtitle = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
            RETURNING {STUDY_FIELDS}
            """,
            (title, subtitle, study_id),
        )
        return cur.fetchone()

    @staticmethod
    def list_passages(cur, study_id: str) -> List[Dict[str, Any]]:
        cur.execute(
            f"""
            SELECT {PASSAGE_FIELDS}
            FROM passage
            WHERE study_id = %s
            ORDER BY display_order ASC
            """,
            (study_id,),
        )
        return cur.fetchall()

    @staticmethod
    def get_passage_owner_id(cur, passage_id: str, for_update: bool = False) -> Optional[Any]:
        """Return the user id owning a passage through its study.

        With ``for_update`` the passage row stays locked until the enclosing
        transaction ends, serializing concurrent edits of one passage.
        """
        query = [
            "SELECT s.user_id",
            "FROM passage p",
            "JOIN study s ON s.id = p.study_id",
            "WHERE p.id = %s",
        ]
        if for_update:
            query.append("FOR UPDATE OF p")
        cur.execute("\n".join(query), (passage_id,))
        row = cur.fetchone()
        return row["user_id"] if row else None

    @staticmethod
    def next_display_order(cur, study_id: str) -> int:
        cur.execute(
            "SELECT COALESCE(MAX(display_order) + 1, 0) AS next_order FROM passage WHERE study_id = %s",
            (study_id,),
        )
        row = cur.fetchone()
        return int(row["next_order"]) if row else 0

    @staticmethod
    def create_passage(
        cur,
        study_id: str,
        testament: str,
        book_id: str,
        book_name: str,
        from_chapter: int,
        to_chapter: int,
        from_verse: int,
        to_verse: int,
        display_order: int,
    ) -> Dict[str, Any]:
        cur.execute(
            f"""
            INSERT INTO passage (
                id, study_id, testament, book_id, book_name,
                from_chapter, to_chapter, from_verse, to_verse, display_order
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {PASSAGE_FIELDS}
            """,
            (
                str(uuid.uuid4()), study_id, testament, book_id, book_name,
                from_chapter, to_chapter, from_verse, to_verse, display_order,
            ),
        )
        return cur.fetchone()

    @staticmethod
    def list_passages_without_structure(cur) -> List[Dict[str, Any]]:
        cur.execute(
            f"""
            SELECT {', '.join('p.' + name.strip() for name in PASSAGE_FIELDS.split(','))}
            FROM passage p
            WHERE NOT EXISTS (
                SELECT 1 FROM passage_column col WHERE col.passage_id = p.id
            )
            ORDER BY p.created_at ASC
            """
        )
        return cur.fetchall()
