import pytest

from fintrack.domain import Category, Product, References
from fintrack.errors import ApiError
from fintrack.references import (
    filter_by_prefix,
    load_references,
    load_references_or_empty,
    match_exact,
    name_map,
)

PRODUCTS = (
    Product("p1", "coffee"),
    Product("p2", "Iced Coffee"),
    Product("p3", "Bread"),
    Product("p4", "Cake", is_deleted=True),
)
CATEGORIES = (
    Category("c1", "Food"),
    Category("c2", "Fast food", is_deleted=True),
)


@pytest.mark.asyncio
async def test_load_references_drops_deleted(fake_service):
    service = fake_service(products=PRODUCTS, categories=CATEGORIES)
    refs = await load_references(service)

    assert [p.id for p in refs.products] == ["p1", "p2", "p3"]
    assert [c.id for c in refs.categories] == ["c1"]


@pytest.mark.asyncio
async def test_load_references_propagates_failure(fake_service):
    service = fake_service(products=PRODUCTS, failing={"list_categories"})
    with pytest.raises(ApiError):
        await load_references(service)


@pytest.mark.asyncio
async def test_load_references_or_empty_degrades(fake_service):
    service = fake_service(products=PRODUCTS, failing={"list_products"})
    assert await load_references_or_empty(service) == References()


def test_match_exact_is_case_insensitive():
    assert match_exact("Coffee", PRODUCTS).id == "p1"
    assert match_exact("ICED COFFEE", PRODUCTS).id == "p2"


def test_match_exact_needs_full_string():
    assert match_exact("Coff", PRODUCTS) is None
    assert match_exact("", PRODUCTS) is None


def test_filter_by_prefix_is_substring():
    names = [p.name for p in filter_by_prefix("COFF", PRODUCTS)]
    assert names == ["coffee", "Iced Coffee"]

    assert [p.name for p in filter_by_prefix("ead", PRODUCTS)] == ["Bread"]
    assert filter_by_prefix("xyz", PRODUCTS) == ()


def test_filter_by_prefix_empty_query_returns_all():
    assert filter_by_prefix("", PRODUCTS) == PRODUCTS


def test_name_map():
    assert name_map(CATEGORIES) == {"c1": "Food", "c2": "Fast food"}
