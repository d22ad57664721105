"""Create passage column, section and segment tables

Revision ID: 0003_create_passage_structure
Revises: 0002_create_passages
Create Date: 2026-09-21
"""
from alembic import op


revision = "0003_create_passage_structure"
down_revision = "0002_create_passages"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS passage_column (
            id TEXT PRIMARY KEY,
            passage_id TEXT NOT NULL REFERENCES passage(id) ON DELETE CASCADE,
            starting_word_id TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (passage_id, starting_word_id)
        );

        CREATE TABLE IF NOT EXISTS passage_section (
            id TEXT PRIMARY KEY,
            passage_column_id TEXT NOT NULL REFERENCES passage_column(id) ON DELETE CASCADE,
            starting_word_id TEXT NOT NULL,
            color TEXT NOT NULL DEFAULT 'blue'
                CHECK (color IN ('red', 'orange', 'yellow', 'green', 'aqua', 'blue', 'purple', 'pink')),
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (passage_column_id, starting_word_id)
        );

        CREATE TABLE IF NOT EXISTS passage_segment (
            id TEXT PRIMARY KEY,
            passage_section_id TEXT NOT NULL REFERENCES passage_section(id) ON DELETE CASCADE,
            starting_word_id TEXT NOT NULL,
            heading_one TEXT,
            heading_two TEXT,
            heading_three TEXT,
            note TEXT,
            commentary TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (passage_section_id, starting_word_id)
        );

        CREATE INDEX IF NOT EXISTS idx_passage_column_passage_id
            ON passage_column(passage_id, starting_word_id);
        CREATE INDEX IF NOT EXISTS idx_passage_section_column_id
            ON passage_section(passage_column_id, starting_word_id);
        CREATE INDEX IF NOT EXISTS idx_passage_segment_section_id
            ON passage_segment(passage_section_id, starting_word_id);
        """
    )


def downgrade():
    op.execute(
        """
        DROP TABLE IF EXISTS passage_segment;
        DROP TABLE IF EXISTS passage_section;
        DROP TABLE IF EXISTS passage_column;
        """
    )
