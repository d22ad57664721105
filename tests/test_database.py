"""Unit tests for database connection and transaction handling."""
import pytest
from unittest.mock import MagicMock, Mock, patch
import psycopg2

from outline_api.database import get_db_connection, transaction
from outline_api.utils.exceptions import BoundaryError


def _mock_conn():
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestDatabaseConnection:
    """Test cases for database connection management."""

    @patch('outline_api.database.psycopg2.connect')
    def test_get_db_connection_success(self, mock_connect):
        """Test successful database connection."""
        mock_conn = Mock()
        mock_connect.return_value = mock_conn

        with get_db_connection() as conn:
            assert conn == mock_conn

        mock_connect.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('outline_api.database.psycopg2.connect')
    def test_get_db_connection_error_with_rollback(self, mock_connect):
        """Test database connection error handling with rollback."""
        mock_conn = Mock()
        mock_connect.return_value = mock_conn

        with pytest.raises(psycopg2.Error):
            with get_db_connection():
                raise psycopg2.Error("Test database error")

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('outline_api.database.psycopg2.connect')
    def test_get_db_connection_connection_error(self, mock_connect):
        """Test database connection failure."""
        mock_connect.side_effect = psycopg2.Error("Connection failed")

        with pytest.raises(psycopg2.Error, match="Connection failed"):
            with get_db_connection():
                pass


class TestTransaction:
    """Test cases for the unit-of-work context manager."""

    @patch('outline_api.database.psycopg2.connect')
    def test_commits_on_success(self, mock_connect):
        mock_conn, mock_cursor = _mock_conn()
        mock_connect.return_value = mock_conn

        with transaction() as cur:
            cur.execute("SELECT 1")

        assert cur is mock_cursor
        mock_conn.commit.assert_called_once()
        mock_conn.rollback.assert_not_called()

    @patch('outline_api.database.psycopg2.connect')
    def test_rolls_back_domain_errors(self, mock_connect):
        mock_conn, _ = _mock_conn()
        mock_connect.return_value = mock_conn

        with pytest.raises(BoundaryError):
            with transaction():
                raise BoundaryError("Cannot insert section at the beginning of an existing section")

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch('outline_api.database.psycopg2.connect')
    def test_rolls_back_database_errors(self, mock_connect):
        mock_conn, _ = _mock_conn()
        mock_connect.return_value = mock_conn

        with pytest.raises(psycopg2.Error):
            with transaction():
                raise psycopg2.Error("deadlock detected")

        mock_conn.rollback.assert_called()
        mock_conn.commit.assert_not_called()
