import asyncio
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Union

from fintrack.domain import (
    EXPENSE,
    INCOME,
    UNKNOWN,
    BreakdownEntry,
    Category,
    Product,
    Summary,
    Transaction,
)
from fintrack.fetcher import fetch, to_iso_instant
from fintrack.logging_setup import get_logger
from fintrack.memo import NoCache, RangeCache
from fintrack.references import active, name_map

logger = get_logger(__name__)


def breakdown(
    totals: dict[str, float], total_expenses: float, names: dict[str, str]
) -> tuple[BreakdownEntry, ...]:
    """Entries sorted by total, largest first.

    ``totals`` must be in encounter order; sorted() is stable so ties keep it.
    """
    entries = (
        BreakdownEntry(
            key=key,
            name=names.get(key) or UNKNOWN,
            total=total,
            percentage=(total / total_expenses) * 100 if total_expenses > 0 else 0,
        )
        for key, total in totals.items()
    )
    return tuple(sorted(entries, key=lambda e: e.total, reverse=True))


def summarize(
    transactions: Iterable[Transaction], categories: Iterable[Category], wallet_balance: float
) -> Summary:
    """Totals and per-category breakdown over a full, unpaged transaction set."""
    total_income = 0.0
    total_expenses = 0.0
    by_category: dict[str, float] = defaultdict(float)

    for t in transactions:
        if t.type == INCOME:
            total_income += t.amount
        elif t.type == EXPENSE:
            total_expenses += t.amount
            by_category[t.category_id] += t.amount

    return Summary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_balance=total_income - total_expenses,
        wallet_balance=wallet_balance,
        expense_by_category=breakdown(by_category, total_expenses, name_map(categories)),
    )


def expense_by_product(
    transactions: Iterable[Transaction], products: Iterable[Product]
) -> tuple[BreakdownEntry, ...]:
    total_expenses = 0.0
    by_product: dict[str, float] = defaultdict(float)

    for t in transactions:
        if t.type == EXPENSE:
            total_expenses += t.amount
            by_product[t.product_id] += t.amount

    return breakdown(by_product, total_expenses, name_map(products))


async def load_summary(
    service,
    start: Union[date, datetime],
    end: Union[date, datetime],
    cache: Optional[RangeCache] = None,
) -> Summary:
    """Fetch everything in range plus categories and wallet, then summarize.

    Any of the three requests failing fails the summary.
    """
    cache = cache if cache is not None else NoCache()
    key = ("summary", to_iso_instant(start), to_iso_instant(end))
    hit = cache.get(key)
    if hit is not None:
        return hit

    transactions, categories, wallet = await asyncio.gather(
        asyncio.to_thread(fetch, service, start, end, 0),
        asyncio.to_thread(service.list_categories),
        asyncio.to_thread(service.get_wallet),
    )
    logger.debug("Calculating summary from %d transactions", len(transactions))
    summary = summarize(transactions, active(categories), wallet.amount)
    cache.put(key, summary)
    return summary


async def load_expense_by_product(
    service,
    start: Union[date, datetime],
    end: Union[date, datetime],
    cache: Optional[RangeCache] = None,
) -> tuple[BreakdownEntry, ...]:
    cache = cache if cache is not None else NoCache()
    key = ("expense_by_product", to_iso_instant(start), to_iso_instant(end))
    hit = cache.get(key)
    if hit is not None:
        return hit

    transactions, products = await asyncio.gather(
        asyncio.to_thread(fetch, service, start, end, 0),
        asyncio.to_thread(service.list_products),
    )
    result = expense_by_product(transactions, active(products))
    logger.debug("Expense by product calculated: %d entries", len(result))
    cache.put(key, result)
    return result
