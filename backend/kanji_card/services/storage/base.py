"""
Record Store Contract

A record store keeps JSON-compatible dicts keyed by
(user_id, collection, record_id). Every repository in the vocabulary core
is built on these four primitives:

    upsert(user_id, collection, record_id, record)
    load(user_id, collection, record_id) -> record   (RecordNotFoundError)
    list_ids(user_id, collection) -> set[str]
    remove(user_id, collection, record_id)            (RecordNotFoundError)

``list_ids`` is a snapshot. A record listed there may be gone by the time
it is loaded, so callers that iterate "everything" skip ids that fail to
load instead of aborting.

Stores make no promises across records: writing N records is N independent
writes, and a failure partway leaves the earlier ones in place.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from kanji_card.enums.storage import RecordCollection
from kanji_card.middleware.error_handling import InvalidRequestError, NotFoundError

Record = dict[str, Any]

# User ids and record ids become path segments in the file store
_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_@+=,.\-]+$")


class RecordNotFoundError(NotFoundError):
    """No record under the requested key."""

    error_code = "record_not_found"


def is_safe_segment(value: str) -> bool:
    return bool(_SAFE_SEGMENT.match(value)) and value not in (".", "..")


def check_user_id(user_id: str) -> str:
    """
    Validate a user id before it scopes any storage access.

    Raises:
        InvalidRequestError: If the id is empty or not a single safe path segment
    """
    if not user_id or not is_safe_segment(user_id):
        raise InvalidRequestError(f"Invalid user id: {user_id!r}")
    return user_id


class RecordStore(ABC):
    """Per-user keyed storage for JSON records."""

    @abstractmethod
    async def upsert(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
        record: Record,
    ) -> None:
        """Create or replace a record."""

    @abstractmethod
    async def load(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
    ) -> Record:
        """
        Load a record.

        Raises:
            RecordNotFoundError: If no record exists under the key
            StorageError: If the record exists but cannot be read or decoded
        """

    @abstractmethod
    async def list_ids(self, user_id: str, collection: RecordCollection) -> set[str]:
        """Snapshot of the ids currently stored in a collection."""

    @abstractmethod
    async def remove(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
    ) -> None:
        """
        Delete a record.

        Raises:
            RecordNotFoundError: If no record exists under the key
        """
