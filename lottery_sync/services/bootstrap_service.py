"""One-time paginated import of past draws into an empty history store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lottery_sync.errors import AppError
from lottery_sync.providers.lottery_api import LotteryApiClient
from lottery_sync.repositories.draw_repository import DrawRepository
from lottery_sync.schemas.draw import load_draws


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackfillResult:
    imported: int
    pages: int
    completed: bool
    error: str | None = None


class BootstrapService:
    """Page through `/history` and write each page as one atomic batch.

    Stops at the first empty page or once `max_records` have been requested.
    Any request, validation or write failure ends the backfill without retry;
    pages already committed stay committed.
    """

    def __init__(
        self,
        repository: DrawRepository,
        api: LotteryApiClient,
        page_size: int = 20,
        max_records: int = 100,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._repository = repository
        self._api = api
        self._page_size = page_size
        self._max_records = max_records

    def backfill(self) -> BackfillResult:
        logger.info("Bootstrapping historical data...")

        offset = 0
        imported = 0
        pages = 0
        error: str | None = None

        while offset < self._max_records:
            try:
                items = self._api.fetch_history_page(limit=self._page_size, offset=offset)
                if not items:
                    break

                records = load_draws(items)
                imported += self._repository.upsert_history_batch(records)
            except AppError as exc:
                logger.error("Bootstrap batch failed: %s", exc.message)
                error = exc.message
                break

            pages += 1
            logger.info("Imported batch: %s records", offset + len(items))
            offset += self._page_size

        logger.info("Bootstrap finished.")
        return BackfillResult(imported=imported, pages=pages, completed=error is None, error=error)
