"""SQLAlchemy models."""

from __future__ import annotations

from mindcalm.models.storage_entry import StorageEntry

__all__ = [
    "StorageEntry",
]
