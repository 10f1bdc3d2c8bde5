from typing import Iterable, Mapping

from fintrack.domain import UNKNOWN, EnrichedTransaction, Transaction


def enrich(
    transactions: Iterable[Transaction],
    category_map: Mapping[str, str],
    product_map: Mapping[str, str],
) -> tuple[EnrichedTransaction, ...]:
    return tuple(
        EnrichedTransaction(
            transaction=t,
            category_name=category_map.get(t.category_id) or UNKNOWN,
            product_name=product_map.get(t.product_id) or UNKNOWN,
        )
        for t in transactions
    )
