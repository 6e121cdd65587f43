"""Shared table metadata."""

from datetime import UTC, datetime

from sqlalchemy import MetaData

metadata = MetaData()


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)
