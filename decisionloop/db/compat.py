"""
Database compatibility layer.

Provides types that behave the same on SQLite (dev/tests) and PostgreSQL:
- UTCDateTime: timezone-aware datetimes in and out, stored as UTC
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, TypeDecorator


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime.

    PostgreSQL keeps the offset (TIMESTAMPTZ). SQLite drops it, so values
    are normalised to UTC on the way in and re-tagged as UTC on the way out.
    Naive values are assumed to already be UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
