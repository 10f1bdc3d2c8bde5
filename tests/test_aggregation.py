import pytest
from datetime import datetime

from fintrack.aggregation import (
    expense_by_product,
    load_expense_by_product,
    load_summary,
    summarize,
)
from fintrack.domain import Category, Product, Transaction
from fintrack.errors import ApiError
from fintrack.memo import MemoryCache


def make_tx(id, type, amount, cat_id="c1", prod_id="p1", deleted=False):
    return Transaction(
        id=id, org_id="o1", user_id="u1", type=type, amount=amount,
        category_id=cat_id, product_id=prod_id,
        created_at="2025-01-01T10:00:00", purchase_date="2025-01-01T10:00:00",
        is_deleted=deleted,
    )


CATEGORIES = (
    Category("c1", "Food"),
    Category("c2", "Transport"),
    Category("c3", "Fun"),
)

START = datetime(2025, 1, 1)
END = datetime(2025, 1, 31)


def test_food_scenario():
    trans = (
        make_tx("t1", "expense", 50, "c1"),
        make_tx("t2", "expense", 50, "c1"),
        make_tx("t3", "income", 200, "c2"),
    )
    s = summarize(trans, CATEGORIES, 1234.5)

    assert s.total_expenses == 100
    assert s.total_income == 200
    assert s.net_balance == 100
    assert s.wallet_balance == 1234.5
    assert len(s.expense_by_category) == 1
    food = s.expense_by_category[0]
    assert (food.key, food.name, food.total, food.percentage) == ("c1", "Food", 100, 100)


def test_empty_set():
    s = summarize((), CATEGORIES, 80)

    assert (s.total_income, s.total_expenses, s.net_balance, s.wallet_balance) == (0, 0, 0, 80)
    assert s.expense_by_category == ()


def test_only_income_has_no_breakdown():
    s = summarize((make_tx("t1", "income", 300),), CATEGORIES, 0)
    assert s.total_expenses == 0
    assert s.net_balance == 300
    assert s.expense_by_category == ()


def test_zero_amount_expenses_give_zero_percentage():
    trans = (make_tx("t1", "expense", 0, "c1"), make_tx("t2", "expense", 0, "c2"))
    s = summarize(trans, CATEGORIES, 0)

    assert len(s.expense_by_category) == 2
    assert all(e.percentage == 0 for e in s.expense_by_category)


def test_totals_partition_by_type():
    trans = (
        make_tx("t1", "expense", 12.5, "c1"),
        make_tx("t2", "income", 40, "c1"),
        make_tx("t3", "expense", 7.25, "c2"),
        make_tx("t4", "income", 0.75, "c3"),
    )
    s = summarize(trans, CATEGORIES, 0)

    assert s.total_income == 40.75
    assert s.total_expenses == 19.75
    assert s.total_income + s.total_expenses == sum(t.amount for t in trans)
    assert s.net_balance == s.total_income - s.total_expenses


def test_percentages_sum_to_hundred_and_sorted():
    trans = (
        make_tx("t1", "expense", 10, "c1"),
        make_tx("t2", "expense", 35, "c2"),
        make_tx("t3", "expense", 5, "c3"),
        make_tx("t4", "expense", 20, "c1"),
    )
    entries = summarize(trans, CATEGORIES, 0).expense_by_category

    assert [e.key for e in entries] == ["c2", "c1", "c3"]
    assert [e.total for e in entries] == [35, 30, 5]
    assert sum(e.percentage for e in entries) == pytest.approx(100)
    assert all(0 <= e.percentage <= 100 for e in entries)


def test_ties_keep_encounter_order():
    trans = (
        make_tx("t1", "expense", 10, "c3"),
        make_tx("t2", "expense", 10, "c1"),
        make_tx("t3", "expense", 10, "c2"),
    )
    entries = summarize(trans, CATEGORIES, 0).expense_by_category
    assert [e.key for e in entries] == ["c3", "c1", "c2"]


def test_unknown_category_name():
    s = summarize((make_tx("t1", "expense", 10, "gone"),), CATEGORIES, 0)
    assert s.expense_by_category[0].name == "Unknown"


def test_expense_by_product():
    products = (Product("p1", "Coffee"), Product("p2", "Bus ticket"))
    trans = (
        make_tx("t1", "expense", 6, prod_id="p1"),
        make_tx("t2", "expense", 18, prod_id="p2"),
        make_tx("t3", "income", 500, prod_id="p1"),
        make_tx("t4", "expense", 6, prod_id="p1"),
    )
    entries = expense_by_product(trans, products)

    assert [(e.name, e.total) for e in entries] == [("Bus ticket", 18), ("Coffee", 12)]
    assert entries[0].percentage == pytest.approx(60)
    assert entries[1].percentage == pytest.approx(40)


@pytest.mark.asyncio
async def test_load_summary_drops_deleted(fake_service):
    service = fake_service(
        transactions=(
            make_tx("t1", "expense", 40, "c1"),
            make_tx("t2", "expense", 1000, "c1", deleted=True),
            make_tx("t3", "income", 100, "c2"),
        ),
        categories=CATEGORIES + (Category("c9", "Old", is_deleted=True),),
        wallet=555,
    )
    s = await load_summary(service, START, END)

    assert s.total_expenses == 40
    assert s.total_income == 100
    assert s.wallet_balance == 555
    assert sorted(service.call_names()) == ["get_wallet", "list_categories", "list_transactions"]
    # the full range is always requested from the start
    assert service.calls[service.call_names().index("list_transactions")][3] == 0


@pytest.mark.asyncio
async def test_load_summary_fails_as_a_whole(fake_service):
    service = fake_service(transactions=(make_tx("t1", "expense", 40),), failing={"get_wallet"})
    with pytest.raises(ApiError):
        await load_summary(service, START, END)


@pytest.mark.asyncio
async def test_load_expense_by_product(fake_service):
    service = fake_service(
        transactions=(make_tx("t1", "expense", 40, prod_id="p1"),),
        products=(Product("p1", "Coffee"),),
    )
    entries = await load_expense_by_product(service, START, END)
    assert entries[0].name == "Coffee"
    assert entries[0].percentage == 100


@pytest.mark.asyncio
async def test_memory_cache_reuses_range(fake_service):
    service = fake_service(transactions=(make_tx("t1", "expense", 40),), categories=CATEGORIES)
    cache = MemoryCache()

    first = await load_summary(service, START, END, cache)
    second = await load_summary(service, START, END, cache)

    assert first == second
    assert service.call_names().count("list_transactions") == 1
    assert len(cache) == 1

    await load_summary(service, START, datetime(2025, 2, 1), cache)
    assert service.call_names().count("list_transactions") == 2


@pytest.mark.asyncio
async def test_default_recomputes_every_time(fake_service):
    service = fake_service(transactions=(make_tx("t1", "expense", 40),))
    await load_summary(service, START, END)
    await load_summary(service, START, END)
    assert service.call_names().count("list_transactions") == 2
