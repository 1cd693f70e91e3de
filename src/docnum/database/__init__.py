"""Database layer for docnum application."""

from docnum.database.base import Database
from docnum.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
