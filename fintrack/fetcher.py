from datetime import date, datetime, time, timezone
from typing import Optional, Union

from fintrack.domain import Page, Transaction
from fintrack.logging_setup import get_logger

logger = get_logger(__name__)


def to_iso_instant(value: Union[date, datetime]) -> str:
    """Serialize a range bound the way the backend expects: UTC, ms, trailing Z."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _not_deleted(trans: tuple[Transaction, ...]) -> tuple[Transaction, ...]:
    return tuple(filter(lambda t: not t.is_deleted, trans))


def fetch(
    service,
    start: Union[date, datetime],
    end: Union[date, datetime],
    skip: int = 0,
    limit: Optional[int] = None,
) -> tuple[Transaction, ...]:
    """Transactions in [start, end] beginning at ``skip``.

    The server only honours ``skip``; ``limit`` is applied here, after the
    soft-delete filter, so a page can come back short while more rows exist.
    """
    raw = service.list_transactions(to_iso_instant(start), to_iso_instant(end), skip)
    filtered = _not_deleted(raw)
    logger.debug("Fetched %d transactions (skip: %d, limit: %s)", len(filtered), skip, limit)
    return filtered[:limit] if limit else filtered


def fetch_page(
    service,
    start: Union[date, datetime],
    end: Union[date, datetime],
    skip: int,
    limit: int,
) -> Page:
    """Up to ``limit`` live rows from ``skip`` on.

    ``consumed`` counts the raw rows up to and including the last kept one,
    so the next page starts right after it even when deleted rows were
    skipped in between. ``has_more`` is true when a live row follows.
    """
    raw = service.list_transactions(to_iso_instant(start), to_iso_instant(end), skip)
    items: list[Transaction] = []
    consumed = 0
    has_more = False
    for i, t in enumerate(raw):
        if t.is_deleted:
            continue
        if len(items) == limit:
            has_more = True
            break
        items.append(t)
        consumed = i + 1
    logger.debug("Fetched page of %d transactions (skip: %d, consumed: %d)", len(items), skip, consumed)
    return Page(items=tuple(items), has_more=has_more, consumed=consumed)
