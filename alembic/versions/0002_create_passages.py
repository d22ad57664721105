"""Create passage table

Revision ID: 0002_create_passages
Revises: 0001_create_users_and_studies
Create Date: 2026-09-14
"""
from alembic import op


revision = "0002_create_passages"
down_revision = "0001_create_users_and_studies"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS passage (
            id TEXT PRIMARY KEY,
            study_id TEXT NOT NULL REFERENCES study(id) ON DELETE CASCADE,
            testament TEXT NOT NULL CHECK (testament IN ('OT', 'NT')),
            book_id TEXT NOT NULL,
            book_name TEXT NOT NULL,
            from_chapter INTEGER NOT NULL,
            to_chapter INTEGER NOT NULL,
            from_verse INTEGER NOT NULL,
            to_verse INTEGER NOT NULL,
            display_order INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_passage_study_id_display_order
            ON passage(study_id, display_order);
        """
    )


def downgrade():
    op.execute(
        """
        DROP INDEX IF EXISTS idx_passage_study_id_display_order;
        DROP TABLE IF EXISTS passage;
        """
    )
