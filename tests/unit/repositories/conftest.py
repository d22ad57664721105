"""Shared fixtures for repository unit tests."""
import pytest
from unittest.mock import MagicMock


@pytest.fixture
def cur():
    """Mock RealDictCursor handed to repository methods.

    Usage in tests:
        def test_something(self, cur):
            cur.fetchone.return_value = {"id": "col-1"}
            # ... call repository method with cur ...
            cur.execute.assert_called_once()
    """
    return MagicMock()
