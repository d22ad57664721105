"""Create users and study tables

Revision ID: 0001_create_users_and_studies
Revises:
Create Date: 2026-09-14
"""
from alembic import op


revision = "0001_create_users_and_studies"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            email TEXT UNIQUE,
            username TEXT UNIQUE NOT NULL,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS study (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            subtitle TEXT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_study_user_id ON study(user_id);
        """
    )


def downgrade():
    op.execute(
        """
        DROP INDEX IF EXISTS idx_study_user_id;
        DROP TABLE IF EXISTS study;
        DROP TABLE IF EXISTS users;
        """
    )
