"""Database layer for societybooks application."""

from societybooks.database.base import Database
from societybooks.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
