from pydantic import AfterValidator, BaseModel, PlainSerializer
from typing import Annotated, Optional
from datetime import datetime, timezone


def normalize_datetime(value: datetime) -> datetime:
    """Convert to naive UTC with millisecond precision."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def format_datetime(value: datetime) -> str:
    """Serialize a datetime as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    value = normalize_datetime(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


# Datetime accepted from and returned to API clients
ApiDateTime = Annotated[
    datetime,
    AfterValidator(normalize_datetime),
    PlainSerializer(format_datetime, return_type=str, when_used="json"),
]


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class PatientSummary(BaseModel):
    """Patient fields embedded in appointment, record and prescription responses."""

    id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
