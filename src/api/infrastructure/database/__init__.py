"""Database infrastructure - shared engine and session primitives."""

from infrastructure.database.dependencies import (
    close_database_connections,
    read_session,
    write_session,
)
from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "close_database_connections",
    "read_session",
    "write_session",
]
