"""
Storage Module

Record stores implementing the per-user keyed storage contract.

Usage:
    from kanji_card.services.storage import get_record_store

    store = get_record_store()
    await store.upsert(user_id, RecordCollection.SETS, set_id, record)
"""

import logging
from functools import lru_cache

from kanji_card.config.settings import settings
from kanji_card.services.storage.base import (
    Record,
    RecordNotFoundError,
    RecordStore,
    check_user_id,
)
from kanji_card.services.storage.file_store import FileRecordStore
from kanji_card.services.storage.memory_store import InMemoryRecordStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_record_store() -> RecordStore:
    """
    Get the process-wide record store selected by settings.STORAGE_BACKEND.

    Raises:
        ValueError: If the configured backend is unknown
    """
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "file":
        logger.info(f"Using file record store at {settings.data_path}")
        return FileRecordStore(settings.data_path)
    if backend == "memory":
        logger.info("Using in-memory record store")
        return InMemoryRecordStore()
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")


__all__ = [
    "FileRecordStore",
    "InMemoryRecordStore",
    "Record",
    "RecordNotFoundError",
    "RecordStore",
    "check_user_id",
    "get_record_store",
]
