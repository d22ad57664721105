"""Repository modules for database operations.

All repository classes are re-exported here for convenient imports.
"""
from outline_api.repositories.passage import PassageRepository
from outline_api.repositories.structure import StructureRepository

__all__ = [
    "PassageRepository",
    "StructureRepository",
]
