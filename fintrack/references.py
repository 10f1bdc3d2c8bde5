import asyncio
from typing import Iterable, Optional, Protocol, TypeVar

from fintrack.domain import References
from fintrack.logging_setup import get_logger

logger = get_logger(__name__)


class Named(Protocol):
    id: str
    name: str
    is_deleted: bool


N = TypeVar("N", bound=Named)


def active(entities: Iterable[N]) -> tuple[N, ...]:
    return tuple(e for e in entities if not e.is_deleted)


async def load_references(service) -> References:
    """Load products and categories side by side, soft-deleted rows dropped.

    Either request failing fails the whole load.
    """
    products, categories = await asyncio.gather(
        asyncio.to_thread(service.list_products),
        asyncio.to_thread(service.list_categories),
    )
    return References(products=active(products), categories=active(categories))


async def load_references_or_empty(service) -> References:
    try:
        return await load_references(service)
    except Exception:
        logger.exception("Error loading products and categories")
        return References()


def match_exact(name: str, entities: Iterable[N]) -> Optional[N]:
    wanted = name.lower()
    for e in entities:
        if e.name.lower() == wanted:
            return e
    return None


def filter_by_prefix(query: str, entities: Iterable[N]) -> tuple[N, ...]:
    # substring containment, not a strict prefix
    if not query:
        return tuple(entities)
    needle = query.lower()
    return tuple(e for e in entities if needle in e.name.lower())


def name_map(entities: Iterable[N]) -> dict[str, str]:
    return {e.id: e.name for e in entities}
