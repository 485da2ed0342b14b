"""Database layer for tagledger application."""

from tagledger.database.base import Database
from tagledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
