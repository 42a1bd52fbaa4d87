"""MongoDB client lifecycle.

One client per job run: constructed on entry, closed on exit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pymongo import MongoClient
from pymongo.database import Database

from lottery_sync.config import Credentials, SyncConfig


logger = logging.getLogger(__name__)


def create_mongo_client(credentials: Credentials) -> MongoClient:
    return MongoClient(credentials.uri, tz_aware=True)


@contextmanager
def open_database(credentials: Credentials, config: SyncConfig) -> Iterator[Database]:
    """Yield the job's database and release the client afterwards."""

    client = create_mongo_client(credentials)
    db_name = credentials.database or config.MONGODB_DB
    logger.info("MongoDB: credentials from %s (db=%s)", credentials.source, db_name)
    try:
        yield client[db_name]
    finally:
        client.close()
