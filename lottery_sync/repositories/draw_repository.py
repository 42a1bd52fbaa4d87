"""Repository layer for draw persistence.

Collections:
- `history`: one document per draw, `_id` = draw code
- `lottery`: the latest pointer, `_id` = "latest"
- `logs`: append-only audit events
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from bson import ObjectId
from pymongo import ReplaceOne
from pymongo.database import Database
from pymongo.errors import PyMongoError

from lottery_sync.errors import StoreError


HISTORY = "history"
LOTTERY = "lottery"
LOGS = "logs"
LATEST_KEY = "latest"

NEW_DRAW_EVENT = "NEW_DRAW"


def _strip_id(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    if doc is None:
        return None
    return {k: v for k, v in doc.items() if k != "_id"}


class DrawRepository:
    """Reads and writes for the history log, the latest pointer and audit events."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def history_is_empty(self) -> bool:
        try:
            return self._db[HISTORY].find_one({}, {"_id": 1}) is None
        except PyMongoError as exc:
            raise StoreError(f"Failed to read {HISTORY}: {exc}") from exc

    def get_latest(self) -> dict[str, Any] | None:
        try:
            doc = self._db[LOTTERY].find_one({"_id": LATEST_KEY})
        except PyMongoError as exc:
            raise StoreError(f"Failed to read {LOTTERY}/{LATEST_KEY}: {exc}") from exc
        return _strip_id(doc)

    def set_latest(self, record: dict[str, Any]) -> None:
        try:
            self._db[LOTTERY].replace_one({"_id": LATEST_KEY}, dict(record), upsert=True)
        except PyMongoError as exc:
            raise StoreError(f"Failed to write {LOTTERY}/{LATEST_KEY}: {exc}") from exc

    def upsert_history(self, record: dict[str, Any]) -> None:
        code = str(record["draw_code"])
        try:
            self._db[HISTORY].replace_one({"_id": code}, dict(record), upsert=True)
        except PyMongoError as exc:
            raise StoreError(f"Failed to write {HISTORY}/{code}: {exc}") from exc

    def upsert_history_batch(self, records: Sequence[dict[str, Any]]) -> int:
        """Write a page of history entries in one transaction.

        Either every record of the page is stored or none is.
        Returns the number of distinct draw codes written.
        """

        ops = [
            ReplaceOne({"_id": str(record["draw_code"])}, dict(record), upsert=True)
            for record in records
        ]
        if not ops:
            return 0

        try:
            with self._db.client.start_session() as session:
                with session.start_transaction():
                    self._db[HISTORY].bulk_write(ops, ordered=True, session=session)
        except PyMongoError as exc:
            raise StoreError(f"Failed to write {HISTORY} batch: {exc}", details={"size": len(ops)}) from exc

        return len({str(record["draw_code"]) for record in records})

    def append_log(self, code: str, event: str = NEW_DRAW_EVENT) -> None:
        # $currentDate needs an update, so the insert goes through an upsert on a fresh id.
        try:
            self._db[LOGS].update_one(
                {"_id": ObjectId()},
                {"$set": {"event": event, "code": code}, "$currentDate": {"time": True}},
                upsert=True,
            )
        except PyMongoError as exc:
            raise StoreError(f"Failed to append to {LOGS}: {exc}") from exc
