"""
Base model class for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience and
provides the shared identifier/timestamp helpers.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from servicedesk.db import Base


def generate_id() -> str:
    """New record identifier (UUID4 hex)."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp stored in UTC.

    PostgreSQL keeps the offset natively; SQLite drops it, so values read
    back without tzinfo are marked as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


__all__ = ["Base", "UTCDateTime", "generate_id", "utcnow"]
