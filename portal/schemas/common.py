"""Types shared by every schema module."""
from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import AfterValidator


def utcnow() -> datetime:
    """Naive UTC timestamp; both backends store datetimes without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


Timestamp = Annotated[datetime, AfterValidator(_as_naive_utc)]

Role = Literal["client", "manager", "admin"]
Priority = Literal["low", "medium", "high"]
