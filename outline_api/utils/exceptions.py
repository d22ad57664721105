"""Custom exceptions for the Passage Outline API."""
from fastapi import HTTPException


class DatabaseError(HTTPException):
    """Database-related errors."""
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(status_code=500, detail=detail)


class ValidationError(HTTPException):
    """Input validation errors."""
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=400, detail=detail)


class BoundaryError(HTTPException):
    """Insertion requested exactly on an existing structure boundary."""
    def __init__(self, detail: str = "Cannot insert at an existing boundary"):
        super().__init__(status_code=400, detail=detail)


class InvalidInsertionPointError(HTTPException):
    """Insertion word id could not be placed inside the passage structure."""
    def __init__(self, detail: str = "Invalid insertion point"):
        super().__init__(status_code=400, detail=detail)


class NotFoundError(HTTPException):
    """Referenced row does not exist or lives under a different parent."""
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class UnauthorizedError(HTTPException):
    """Caller does not own the passage being modified."""
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=401, detail=detail)


class ForbiddenError(HTTPException):
    """Caller is authenticated but may not touch this resource."""
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=403, detail=detail)
