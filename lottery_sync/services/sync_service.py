"""Fetch the current draw, compare it to the stored pointer, publish on change."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from lottery_sync.config import SyncConfig
from lottery_sync.errors import AppError, InvalidResponseError
from lottery_sync.providers.lottery_api import LotteryApiClient
from lottery_sync.repositories.draw_repository import DrawRepository
from lottery_sync.schemas.draw import load_draw
from lottery_sync.services.bootstrap_service import BackfillResult, BootstrapService


logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FATAL_FAILURE = "fatal_failure"


class SyncAction(str, Enum):
    NEW_DRAW = "new_draw"
    UNCHANGED = "unchanged"
    INVALID_RESPONSE = "invalid_response"
    NOT_RUN = "not_run"


@dataclass(frozen=True)
class SyncResult:
    status: JobStatus
    action: SyncAction
    draw_code: str | None = None
    backfilled: int | None = None
    error: str | None = None


class SyncService:
    """Single pass of the mirror job."""

    def __init__(
        self,
        repository: DrawRepository,
        api: LotteryApiClient,
        bootstrap: BootstrapService | None = None,
    ) -> None:
        self._repository = repository
        self._api = api
        self._bootstrap = bootstrap or BootstrapService(repository, api)

    def publish_latest(self) -> tuple[SyncAction, str | None]:
        """Mirror `/latest` into the pointer, history and logs if the draw code changed.

        Raises:
            UpstreamError: the request failed.
            StoreError: a read or write failed.
        """

        logger.info("Checking for new results...")
        payload = self._api.fetch_latest()

        try:
            record = load_draw(payload)
        except InvalidResponseError:
            logger.warning("Invalid data received from API.")
            return SyncAction.INVALID_RESPONSE, None

        code = str(record["draw_code"])
        stored = self._repository.get_latest()

        if stored is not None and stored.get("draw_code") == code:
            logger.info("No new draw. Currently at: %s", code)
            return SyncAction.UNCHANGED, code

        logger.info("NEW DRAW DETECTED: %s", code)
        self._repository.upsert_history(record)
        self._repository.set_latest(record)
        self._repository.append_log(code)
        logger.info("Store updated successfully.")
        return SyncAction.NEW_DRAW, code

    def run(self) -> SyncResult:
        backfill: BackfillResult | None = None
        try:
            if self._repository.history_is_empty():
                backfill = self._bootstrap.backfill()

            action, code = self.publish_latest()
        except AppError as exc:
            logger.error("Worker failed: %s", exc.message)
            return SyncResult(
                status=JobStatus.FATAL_FAILURE,
                action=SyncAction.NOT_RUN,
                backfilled=backfill.imported if backfill else None,
                error=exc.message,
            )
        except Exception as exc:
            logger.exception("Worker failed")
            return SyncResult(
                status=JobStatus.FATAL_FAILURE,
                action=SyncAction.NOT_RUN,
                backfilled=backfill.imported if backfill else None,
                error=str(exc),
            )

        status = JobStatus.SUCCESS
        if backfill is not None and not backfill.completed:
            status = JobStatus.PARTIAL_FAILURE

        return SyncResult(
            status=status,
            action=action,
            draw_code=code,
            backfilled=backfill.imported if backfill else None,
            error=backfill.error if backfill else None,
        )


def run_job(repository: DrawRepository, api: LotteryApiClient, config: SyncConfig) -> SyncResult:
    bootstrap = BootstrapService(
        repository,
        api,
        page_size=config.HISTORY_PAGE_SIZE,
        max_records=config.HISTORY_MAX_RECORDS,
    )
    return SyncService(repository, api, bootstrap=bootstrap).run()
