"""Shared schema helpers."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and computed dates compare cleanly."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    """Timestamp-prefixed identifier; the random suffix keeps rapid double submits apart."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


Timestamp = Annotated[datetime, AfterValidator(as_utc)]
