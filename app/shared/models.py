from pydantic import Field
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time, naive and truncated to milliseconds as MongoDB stores it."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


class TimestampMixin:
    """Mixin for adding timestamp fields to documents."""

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def update_timestamp(self):
        """Update the updated_at timestamp."""
        self.updated_at = utc_now()
