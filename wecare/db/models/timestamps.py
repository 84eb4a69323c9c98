# wecare/db/models/timestamps.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlmodel import Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_field(**kwargs: Any) -> Any:
    """Timezone-aware UTC timestamp column, defaulting to now unless a default is given."""
    if "default" not in kwargs:
        kwargs["default_factory"] = utc_now
    return Field(sa_type=DateTime(timezone=True), **kwargs)
