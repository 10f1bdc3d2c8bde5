import asyncio
from datetime import date, datetime
from typing import Optional, Union

from fintrack.domain import EnrichedTransaction, Page
from fintrack.enrich import enrich
from fintrack.fetcher import fetch_page
from fintrack.logging_setup import get_logger
from fintrack.references import load_references, name_map

logger = get_logger(__name__)

PAGE_SIZE = 10

DateLike = Union[date, datetime]


class PaginationController:
    """The growing list of transactions shown under the dashboard.

    ``displayed`` only grows between two resets. ``skip`` is where the last
    page started in the backend's raw stream; the next page starts after the
    raw rows that page consumed, so deleted rows never shift a live row into
    two pages. Every reset bumps the generation, and a page that arrives for
    an older generation is dropped.
    """

    def __init__(self, service, page_size: int = PAGE_SIZE):
        self.service = service
        self.page_size = page_size
        self.start: Optional[DateLike] = None
        self.end: Optional[DateLike] = None
        self.skip = 0
        self.has_more = False
        self.displayed: tuple[EnrichedTransaction, ...] = ()
        self.is_loading_more = False
        self._next_skip = 0
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def fetch_window(self, start: DateLike, end: DateLike, skip: int) -> tuple[tuple[EnrichedTransaction, ...], Page]:
        """One enriched page plus the raw page it came from; touches no state."""
        page, refs = await asyncio.gather(
            asyncio.to_thread(fetch_page, self.service, start, end, skip, self.page_size),
            load_references(self.service),
        )
        return enrich(page.items, name_map(refs.categories), name_map(refs.products)), page

    def adopt(self, start: DateLike, end: DateLike, first: tuple[EnrichedTransaction, ...], page: Page) -> None:
        self._generation += 1
        self.start, self.end = start, end
        self.skip = 0
        self._next_skip = page.consumed
        self.displayed = first
        self.has_more = page.has_more

    async def reset(self, start: DateLike, end: DateLike) -> tuple[EnrichedTransaction, ...]:
        self._generation += 1
        generation = self._generation
        self.start, self.end = start, end
        self.skip = 0
        self._next_skip = 0
        self.displayed = ()
        self.has_more = False

        first, page = await self.fetch_window(start, end, 0)
        if generation != self._generation:
            logger.debug("Dropping first page of superseded range")
            return self.displayed
        self._next_skip = page.consumed
        self.displayed = first
        self.has_more = page.has_more
        return first

    async def load_more(self) -> tuple[EnrichedTransaction, ...]:
        if self.start is None or not self.has_more or self.is_loading_more:
            return ()

        generation = self._generation
        next_skip = self._next_skip
        logger.debug("Loading more transactions, skip: %d", next_skip)
        self.is_loading_more = True
        try:
            more, page = await self.fetch_window(self.start, self.end, next_skip)
        finally:
            self.is_loading_more = False

        if generation != self._generation:
            logger.debug("Dropping page for skip %d, range changed", next_skip)
            return ()
        self.displayed = self.displayed + more
        self.skip = next_skip
        self._next_skip = next_skip + page.consumed
        self.has_more = page.has_more
        return more
