# recipe_voyage/orm_types.py
from datetime import datetime, timezone

from sqlalchemy.types import TypeDecorator, DateTime


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime on every backend.

    - PostgreSQL: TIMESTAMP WITH TIME ZONE
    - SQLite: naive DATETIME holding UTC, re-tagged as UTC on load
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, datetime):
            raise TypeError(f"Expected datetime, got {type(value).__name__}")
        value = as_utc(value)
        return value if dialect.name == "postgresql" else value.replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return as_utc(value)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
