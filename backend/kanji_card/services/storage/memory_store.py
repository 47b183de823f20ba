"""In-memory record store for tests and throwaway runs."""

import copy

from kanji_card.enums.storage import RecordCollection
from kanji_card.services.storage.base import (
    Record,
    RecordNotFoundError,
    RecordStore,
    check_user_id,
)


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed record store.

    Records are deep-copied on the way in and out so callers can't mutate
    stored state through a reference they still hold.
    """

    def __init__(self):
        self._records: dict[tuple[str, RecordCollection], dict[str, Record]] = {}

    def _bucket(self, user_id: str, collection: RecordCollection) -> dict[str, Record]:
        key = (check_user_id(user_id), collection)
        return self._records.setdefault(key, {})

    async def upsert(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
        record: Record,
    ) -> None:
        self._bucket(user_id, collection)[record_id] = copy.deepcopy(record)

    async def load(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
    ) -> Record:
        bucket = self._bucket(user_id, collection)
        if record_id not in bucket:
            raise RecordNotFoundError(f"{collection.value} record {record_id} not found")
        return copy.deepcopy(bucket[record_id])

    async def list_ids(self, user_id: str, collection: RecordCollection) -> set[str]:
        return set(self._bucket(user_id, collection))

    async def remove(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
    ) -> None:
        bucket = self._bucket(user_id, collection)
        if record_id not in bucket:
            raise RecordNotFoundError(f"{collection.value} record {record_id} not found")
        del bucket[record_id]
