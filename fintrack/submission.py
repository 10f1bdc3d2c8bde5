from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Optional, TypeVar, Union

from fintrack.domain import EXPENSE, INCOME, References, TransactionCreate
from fintrack.functional import Either, Left, Matched, Resolution, Right, Unmatched
from fintrack.logging_setup import get_logger
from fintrack.references import active, match_exact

logger = get_logger(__name__)

IMPLICIT = "implicit"   # backend creates unknown names on its own
EXPLICIT = "explicit"   # create unknown category/product before the transaction

MISSING_NAMES = "Please enter both product and category"

N = TypeVar("N")


@dataclass(frozen=True)
class TransactionForm:
    amount: Union[str, float]
    product: str
    category: str
    type: str = EXPENSE
    quantity: float = 1
    note: str = ""
    purchase_date: Optional[str] = None  # YYYY-MM-DD, today when empty


def resolve(raw: str, entities: Iterable[N]) -> Resolution[N]:
    name = raw.strip()
    found = match_exact(name, entities)
    if found is not None:
        return Matched(found)
    return Unmatched(name)


def is_new(raw: str, entities: Iterable) -> bool:
    """Drives the "Add new ..." hint under the product/category inputs."""
    return bool(raw.strip()) and not resolve(raw, entities).is_matched()


def _parse_amount(value: Union[str, float]) -> Optional[float]:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if amount != amount or amount <= 0:
        return None
    return amount


def _check_names(form: TransactionForm) -> Either[dict, TransactionForm]:
    missing = tuple(
        field for field, value in (("product", form.product), ("category", form.category))
        if not value.strip()
    )
    if missing:
        return Left({
            "error": "missing_fields",
            "message": MISSING_NAMES,
            "fields": missing,
        })
    return Right(form)


def _check_type(form: TransactionForm) -> Either[dict, TransactionForm]:
    if form.type not in (INCOME, EXPENSE):
        return Left({
            "error": "invalid_type",
            "message": f"Transaction type must be income or expense, got {form.type}",
            "fields": ("type",),
        })
    return Right(form)


def _check_amount(form: TransactionForm) -> Either[dict, TransactionForm]:
    if _parse_amount(form.amount) is None:
        return Left({
            "error": "invalid_amount",
            "message": "Amount must be a positive number",
            "fields": ("amount",),
        })
    return Right(form)


def _check_quantity(form: TransactionForm) -> Either[dict, TransactionForm]:
    # NaN fails both comparisons
    if not form.quantity >= 1:
        return Left({
            "error": "invalid_quantity",
            "message": "Quantity must be at least 1",
            "fields": ("quantity",),
        })
    return Right(form)


def _to_payload(form: TransactionForm) -> TransactionCreate:
    return TransactionCreate(
        amount=_parse_amount(form.amount) * form.quantity,
        type=form.type,
        category_name=form.category.strip(),
        product_name=form.product.strip(),
        purchase_date=form.purchase_date or date.today().isoformat(),
        note=form.note or None,
    )


def build_transaction(form: TransactionForm) -> Either[dict, TransactionCreate]:
    """Checks run in order and the first failing one wins."""
    return (
        Right(form)
        .bind(_check_names)
        .bind(_check_type)
        .bind(_check_amount)
        .bind(_check_quantity)
        .map(_to_payload)
    )


def _create_missing(service, category: Resolution, product: Resolution) -> None:
    category_id = category.entity.id if category.is_matched() else None
    if not category.is_matched():
        logger.info("Creating category %r", category.name)
        service.create_category(category.name)
        created = match_exact(category.name, active(service.list_categories()))
        category_id = created.id if created is not None else None
    if not product.is_matched():
        logger.info("Creating product %r", product.name)
        service.create_product(product.name, category_id)


def submit_transaction(
    service,
    form: TransactionForm,
    references: References,
    policy: str = IMPLICIT,
    on_success: Optional[Callable[[], None]] = None,
) -> Either[dict, Any]:
    """Validate locally, then send the transaction.

    A ``Left`` means nothing was sent. Transport errors are raised.
    """
    built = build_transaction(form)
    if built.is_left():
        return built
    payload = built.get_or_else(None)

    category = resolve(payload.category_name, references.categories)
    product = resolve(payload.product_name, references.products)
    if policy == EXPLICIT:
        _create_missing(service, category, product)
    elif policy != IMPLICIT:
        raise ValueError(f"Unknown creation policy: {policy}")

    # matched names go out with their stored spelling
    payload = TransactionCreate(
        amount=payload.amount,
        type=payload.type,
        category_name=category.name,
        product_name=product.name,
        purchase_date=payload.purchase_date,
        note=payload.note,
    )
    logger.info("Creating %s transaction of %.2f", payload.type, payload.amount)
    response = service.create_transaction(payload)
    if on_success is not None:
        on_success()
    return Right(response)
