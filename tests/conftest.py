import json

import pytest
import requests

from fintrack.domain import Category, Product, Wallet
from fintrack.errors import ApiError


class FakeService:
    """In-memory stand-in for TransactionService.

    ``list_transactions`` ignores the range and honours only ``skip``, like the
    real backend. Methods named in ``failing`` raise ApiError.
    """

    def __init__(self, transactions=(), products=(), categories=(), wallet=0.0, failing=()):
        self.transactions = tuple(transactions)
        self.products = tuple(products)
        self.categories = tuple(categories)
        self.wallet = wallet
        self.failing = set(failing)
        self.calls = []
        self.created = []

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.failing:
            raise ApiError(f"{name} failed", status_code=500, detail=f"{name} is down")

    def list_transactions(self, start_date, end_date, skip=0):
        self._call("list_transactions", start_date, end_date, skip)
        return self.transactions[skip:]

    def list_products(self):
        self._call("list_products")
        return self.products

    def list_categories(self):
        self._call("list_categories")
        return self.categories

    def get_wallet(self):
        self._call("get_wallet")
        return Wallet(id="w1", org_id="o1", amount=self.wallet)

    def create_transaction(self, payload):
        self._call("create_transaction", payload)
        self.created.append(payload)
        return {"message": "Transaction created"}

    def create_category(self, name):
        self._call("create_category", name)
        self.categories = self.categories + (Category(id=f"c-{name}", name=name),)
        return {"message": "Category created"}

    def create_product(self, name, category_id=None):
        self._call("create_product", name, category_id)
        self.products = self.products + (Product(id=f"p-{name}", name=name, category_id=category_id),)
        return {"message": "Product created"}

    def call_names(self):
        return [c[0] for c in self.calls]


class FakeHttp:
    """Records requests and replays queued (status, body) answers as real Responses."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        status, body = answer
        response = requests.Response()
        response.status_code = status
        response._content = b"" if body is None else json.dumps(body).encode("utf-8")
        response.url = url
        return response


@pytest.fixture
def fake_service():
    return FakeService


@pytest.fixture
def fake_http():
    return FakeHttp
