import copy
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pymongo.errors import OperationFailure

# Ensure the repository root is importable when running tests directly from the repo.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lottery_sync.errors import UpstreamError  # noqa: E402


class FakeCollection:
    """Just enough of pymongo's Collection for the repository."""

    def __init__(self, name, db):
        self.name = name
        self._db = db
        self.docs = {}
        self.fail_writes = False
        self.fail_bulk_after = None

    def _check(self):
        if self.fail_writes:
            raise OperationFailure(f"write to {self.name} refused")

    def find_one(self, filter=None, projection=None, session=None):
        filter = filter or {}
        if "_id" in filter:
            doc = self.docs.get(filter["_id"])
        else:
            doc = next(iter(self.docs.values()), None)
        if doc is None:
            return None
        if projection:
            return {k: v for k, v in doc.items() if projection.get(k)}
        return copy.deepcopy(doc)

    def replace_one(self, filter, replacement, upsert=False, session=None):
        self._check()
        key = filter["_id"]
        self.docs[key] = {"_id": key, **copy.deepcopy(replacement)}
        self._db.writes.append((self.name, "replace", key))

    def bulk_write(self, requests, ordered=True, session=None):
        self._check()
        for i, op in enumerate(requests):
            if self.fail_bulk_after is not None and i >= self.fail_bulk_after:
                raise OperationFailure(f"bulk write to {self.name} interrupted")
            key = op._filter["_id"]
            self.docs[key] = {"_id": key, **copy.deepcopy(op._doc)}
            self._db.writes.append((self.name, "bulk_replace", key))

    def update_one(self, filter, update, upsert=False, session=None):
        self._check()
        key = filter["_id"]
        doc = {"_id": key, **update.get("$set", {})}
        for field in update.get("$currentDate", {}):
            doc[field] = datetime.now(timezone.utc)
        self.docs[key] = doc
        self._db.writes.append((self.name, "update", key))


class FakeSession:
    def __init__(self, db):
        self._db = db
        self.transactions = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    @contextmanager
    def start_transaction(self):
        self.transactions += 1
        snapshot = {name: copy.deepcopy(col.docs) for name, col in self._db.collections.items()}
        try:
            yield self
        except Exception:
            for name, docs in snapshot.items():
                self._db.collections[name].docs = docs
            raise


class FakeClient:
    def __init__(self, db):
        self._db = db
        self.closed = False
        self.sessions = []

    def start_session(self):
        session = FakeSession(self._db)
        self.sessions.append(session)
        return session

    def close(self):
        self.closed = True


class FakeDatabase:
    def __init__(self):
        self.collections = {}
        self.writes = []
        self.client = FakeClient(self)

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, self)
        return self.collections[name]


class FakeApi:
    """Stands in for LotteryApiClient."""

    def __init__(self, pages=None, latest=None, page_factory=None):
        self.pages = pages or []
        self.latest = latest
        self.page_factory = page_factory
        self.history_calls = []
        self.latest_calls = 0
        self.fail_at_offset = None
        self.fail_latest = False

    def fetch_history_page(self, limit, offset):
        self.history_calls.append((limit, offset))
        if self.fail_at_offset is not None and offset == self.fail_at_offset:
            raise UpstreamError("GET history failed: boom")
        if self.page_factory is not None:
            return self.page_factory(limit, offset)
        index = offset // limit
        if index < len(self.pages):
            return copy.deepcopy(self.pages[index])
        return []

    def fetch_latest(self):
        self.latest_calls += 1
        if self.fail_latest:
            raise UpstreamError("GET latest failed: boom")
        return copy.deepcopy(self.latest)

    def close(self):
        pass


def make_page(start, count, prefix="D"):
    return [{"draw_code": f"{prefix}{n}", "numbers": [n, n + 1, n + 2]} for n in range(start, start + count)]


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def repository(fake_db):
    from lottery_sync.repositories.draw_repository import DrawRepository

    return DrawRepository(fake_db)
