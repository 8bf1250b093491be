"""Local store exports for gdataminer."""

from __future__ import annotations

from .base import (
    CONTACTS_SCOPE,
    EQUIPMENT_SCOPE,
    LocalStore,
    ResourceHandle,
    WriteBatch,
)
from .memory import MemoryStore
from .sqlite import SqliteStore

__all__ = [
    "CONTACTS_SCOPE",
    "EQUIPMENT_SCOPE",
    "LocalStore",
    "ResourceHandle",
    "WriteBatch",
    "MemoryStore",
    "SqliteStore",
]
