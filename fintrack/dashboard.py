import asyncio
from datetime import datetime, timedelta
from typing import Optional

from fintrack.aggregation import load_expense_by_product, load_summary
from fintrack.domain import BreakdownEntry, EnrichedTransaction, Summary
from fintrack.errors import user_message
from fintrack.logging_setup import get_logger
from fintrack.memo import NoCache, RangeCache
from fintrack.pagination import PAGE_SIZE, DateLike, PaginationController

logger = get_logger(__name__)


def default_range(days: int = 30, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    end = now or datetime.now()
    return end - timedelta(days=days), end


class DashboardSession:
    """State behind one dashboard view.

    A fetch cycle loads summary, product breakdown and the first page of
    transactions together. Either all three land or none do; on failure the
    previous views stay and ``error`` holds one message. Results from a cycle
    that was superseded by a newer one are dropped.
    """

    def __init__(
        self,
        service,
        page_size: int = PAGE_SIZE,
        cache: Optional[RangeCache] = None,
        range_days: int = 30,
    ):
        self.service = service
        self.cache = cache if cache is not None else NoCache()
        self.start, self.end = default_range(range_days)
        self.summary: Optional[Summary] = None
        self.expense_by_product: tuple[BreakdownEntry, ...] = ()
        self.pagination = PaginationController(service, page_size)
        self.error: Optional[str] = None
        self.is_loading = False
        self._generation = 0

    @property
    def displayed(self) -> tuple[EnrichedTransaction, ...]:
        return self.pagination.displayed

    @property
    def has_more(self) -> bool:
        return self.pagination.has_more

    async def set_range(self, start: DateLike, end: DateLike) -> bool:
        self.start, self.end = start, end
        return await self.refresh()

    async def refresh(self) -> bool:
        """Run one fetch cycle; returns False when it failed or was superseded."""
        self._generation += 1
        generation = self._generation
        start, end = self.start, self.end
        self.is_loading = True
        self.error = None
        logger.info("Fetching dashboard data for range %s - %s", start, end)

        try:
            summary, by_product, (first, page) = await asyncio.gather(
                load_summary(self.service, start, end, self.cache),
                load_expense_by_product(self.service, start, end, self.cache),
                self.pagination.fetch_window(start, end, 0),
            )
        except Exception as e:
            if generation != self._generation:
                logger.debug("Ignoring failure of superseded fetch cycle: %s", e)
                return False
            logger.exception("Error fetching dashboard data")
            self.error = user_message(e)
            # the shown data still belongs to the last range that loaded
            if self.pagination.start is not None:
                self.start, self.end = self.pagination.start, self.pagination.end
            self.is_loading = False
            return False

        if generation != self._generation:
            logger.debug("Discarding results of superseded fetch cycle")
            return False

        self.summary = summary
        self.expense_by_product = by_product
        self.pagination.adopt(start, end, first, page)
        self.is_loading = False
        return True

    async def load_more(self) -> tuple[EnrichedTransaction, ...]:
        try:
            return await self.pagination.load_more()
        except Exception as e:
            logger.exception("Error loading more transactions")
            self.error = user_message(e, "Failed to load more transactions")
            return ()
