"""Process entrypoint: run the sync job once and exit.

Usage:
  MONGODB_URI=mongodb://localhost:27017 python main.py

Exit code is 0 for every job result unless STRICT_EXIT_CODES is set, in which
case partial failures exit 2 and fatal failures exit 1. Missing credentials
always exit 1.
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from lottery_sync.config import get_config, load_credentials
from lottery_sync.db import open_database
from lottery_sync.errors import MissingCredentialsError
from lottery_sync.logging_config import configure_logging
from lottery_sync.providers.lottery_api import LotteryApiClient, build_http_session
from lottery_sync.repositories.draw_repository import DrawRepository
from lottery_sync.services.sync_service import JobStatus, SyncAction, SyncResult, run_job


logger = logging.getLogger(__name__)

_STRICT_EXIT_CODES = {
    JobStatus.SUCCESS: 0,
    JobStatus.PARTIAL_FAILURE: 2,
    JobStatus.FATAL_FAILURE: 1,
}


def exit_code_for(result: SyncResult, strict: bool) -> int:
    if not strict:
        return 0
    return _STRICT_EXIT_CODES[result.status]


def main() -> int:
    load_dotenv()

    config = get_config()
    configure_logging(config.LOG_LEVEL)

    try:
        credentials = load_credentials()
    except MissingCredentialsError as exc:
        logger.error("ERROR: %s", exc.message)
        return 1
    logger.info("Loaded credentials from %s", credentials.source)

    api = LotteryApiClient(
        config.API_BASE,
        session=build_http_session(retries=config.HTTP_RETRIES),
        timeout_seconds=config.HTTP_TIMEOUT,
    )
    try:
        with open_database(credentials, config) as db:
            result = run_job(DrawRepository(db), api, config)
    except PyMongoError as exc:
        # Client construction (bad URI, bad options) fails before the job starts.
        logger.error("Worker failed: %s", exc)
        result = SyncResult(status=JobStatus.FATAL_FAILURE, action=SyncAction.NOT_RUN, error=str(exc))
    finally:
        api.close()
        logger.info("Worker finished execution.")

    logger.info(
        "Result: status=%s action=%s draw_code=%s backfilled=%s",
        result.status.value,
        result.action.value,
        result.draw_code,
        result.backfilled,
    )
    return exit_code_for(result, config.STRICT_EXIT_CODES)


if __name__ == "__main__":
    raise SystemExit(main())
