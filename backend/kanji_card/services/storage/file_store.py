"""
File Record Store

Persists one pretty-printed JSON document per record:

    <data_dir>/
    ├── sets/
    │   └── <user_id>/
    │       └── <set_id>.json
    ├── archive_cards/
    │   └── <user_id>/<card_id>.json
    └── archive_stories/
        └── <user_id>/<story_id>.json

Writes go to a temporary sibling first and are moved into place with
os.replace, so a reader never sees a half-written document. There is no
locking here; per-user serialization is the service layer's job.
"""

import json
import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from kanji_card.enums.storage import RecordCollection
from kanji_card.middleware.error_handling import StorageError
from kanji_card.services.storage.base import (
    Record,
    RecordNotFoundError,
    RecordStore,
    check_user_id,
    is_safe_segment,
)
from kanji_card.utils.ids import new_id

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"


class FileRecordStore(RecordStore):
    """
    Record store backed by a directory tree of JSON files.

    Attributes:
        data_dir: Root directory; created on first write
    """

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir).expanduser()

    def _user_dir(self, user_id: str, collection: RecordCollection) -> Path:
        return self.data_dir / collection.value / check_user_id(user_id)

    def _record_path(
        self, user_id: str, collection: RecordCollection, record_id: str
    ) -> Path:
        return self._user_dir(user_id, collection) / f"{record_id}{RECORD_SUFFIX}"

    @staticmethod
    async def _discard(tmp_path: Path) -> None:
        """Remove a temporary file left by a failed write."""
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {tmp_path}: {e}")

    async def upsert(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
        record: Record,
    ) -> None:
        if not is_safe_segment(record_id):
            raise StorageError(f"Invalid record id: {record_id!r}")

        user_dir = self._user_dir(user_id, collection)
        path = user_dir / f"{record_id}{RECORD_SUFFIX}"
        tmp_path = user_dir / f".{record_id}.{new_id()}.tmp"

        try:
            payload = json.dumps(record, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize {collection.value}/{record_id}: {e}") from e

        try:
            await aiofiles.os.makedirs(user_dir, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            await self._discard(tmp_path)
            raise StorageError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Wrote {collection.value}/{user_id}/{record_id}")

    async def load(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
    ) -> Record:
        if not is_safe_segment(record_id):
            raise RecordNotFoundError(f"{collection.value} record {record_id!r} not found")

        path = self._record_path(user_id, collection, record_id)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError as e:
            raise RecordNotFoundError(
                f"{collection.value} record {record_id} not found"
            ) from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

        try:
            record = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt record {path}: {e}") from e

        if not isinstance(record, dict):
            raise StorageError(f"Corrupt record {path}: expected a JSON object")
        return record

    async def list_ids(self, user_id: str, collection: RecordCollection) -> set[str]:
        user_dir = self._user_dir(user_id, collection)
        try:
            names = await aiofiles.os.listdir(user_dir)
        except FileNotFoundError:
            return set()
        except OSError as e:
            raise StorageError(f"Failed to list {user_dir}: {e}") from e

        return {
            name[: -len(RECORD_SUFFIX)]
            for name in names
            if name.endswith(RECORD_SUFFIX) and not name.startswith(".")
        }

    async def remove(
        self,
        user_id: str,
        collection: RecordCollection,
        record_id: str,
    ) -> None:
        if not is_safe_segment(record_id):
            raise RecordNotFoundError(f"{collection.value} record {record_id!r} not found")

        path = self._record_path(user_id, collection, record_id)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise RecordNotFoundError(
                f"{collection.value} record {record_id} not found"
            ) from e
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}") from e

        logger.debug(f"Removed {collection.value}/{user_id}/{record_id}")
