"""Key-value state container.

Every domain collection lives under one fixed key as a whole JSON document.
Reads parse each key independently and fall back to an empty collection when
the key is missing or its value cannot be parsed; writes replace the whole
document (last write wins). There is no atomicity across keys.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from mindcalm.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

MOODS_KEY = "moods"
LIFESTYLE_KEY = "lifestyle"
THOUGHTS_KEY = "thoughts"
MEDICATIONS_KEY = "medications"
MED_LOGS_KEY = "medLogs"
ACTIVITIES_KEY = "activities"
BREATHING_KEY = "breathingSessions"
GAD7_KEY = "gad7History"
WORKOUTS_KEY = "workouts"
WORRIES_KEY = "worries"
THEME_KEY = "theme"
CBT_DRAFT_KEY = "cbt_draft"
WORRY_TIME_KEY = "worry_schedule_time"
WORRY_DURATION_KEY = "worry_schedule_duration"


class StateStore:
    """Reads and writes JSON blobs in the ``storage_entries`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def load(self, key: str, default: Any = None) -> Any:
        entry = self.db.get(StorageEntry, key)
        if entry is None:
            return default
        try:
            return json.loads(entry.value)
        except json.JSONDecodeError:
            logger.warning("Ignoring unparseable value stored under key=%s", key)
            return default

    def save(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        entry = self.db.get(StorageEntry, key)
        if entry is None:
            self.db.add(StorageEntry(key=key, value=payload))
        else:
            entry.value = payload
        self.db.commit()

    def delete(self, key: str) -> None:
        entry = self.db.get(StorageEntry, key)
        if entry is not None:
            self.db.delete(entry)
            self.db.commit()

    def load_list(self, key: str, model: type[M]) -> list[M]:
        """Load a collection; data that no longer fits the schema counts as absent."""
        raw = self.load(key, [])
        try:
            return TypeAdapter(list[model]).validate_python(raw)
        except ValidationError:
            logger.warning("Discarding malformed collection under key=%s", key)
            return []

    def save_list(self, key: str, items: list[BaseModel]) -> None:
        self.save(key, [item.model_dump(mode="json") for item in items])

    def load_model(self, key: str, model: type[M]) -> M | None:
        raw = self.load(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding malformed document under key=%s", key)
            return None

    def save_model(self, key: str, item: BaseModel) -> None:
        self.save(key, item.model_dump(mode="json"))

    def append(self, key: str, model: type[M], item: M) -> list[M]:
        items = self.load_list(key, model)
        items.append(item)
        self.save_list(key, items)
        return items

    def prepend(self, key: str, model: type[M], item: M) -> list[M]:
        items = [item, *self.load_list(key, model)]
        self.save_list(key, items)
        return items
