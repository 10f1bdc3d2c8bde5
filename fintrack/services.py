from typing import Any, Optional

from fintrack.api import ApiClient
from fintrack.domain import Category, Product, Transaction, TransactionCreate, Wallet


class TransactionService:
    """Facade over the backend's CRUD endpoints.

    Returns raw rows (soft-deleted ones included); filtering happens in the
    fetcher and reference resolver.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    # transactions
    def list_transactions(self, start_date: str, end_date: str, skip: int = 0) -> tuple[Transaction, ...]:
        params = {"start_date": start_date, "end_date": end_date, "skip": skip}
        rows = self.client.get("/transactions/", params=params) or []
        return tuple(Transaction.from_api(r) for r in rows)

    def get_transaction(self, transaction_id: str) -> Transaction:
        return Transaction.from_api(self.client.get(f"/transactions/id/{transaction_id}"))

    def create_transaction(self, payload: TransactionCreate) -> Any:
        return self.client.post("/transactions/", payload.to_api())

    def delete_transaction(self, transaction_id: str) -> Any:
        return self.client.delete(f"/transactions/id/{transaction_id}")

    # categories
    def list_categories(self) -> tuple[Category, ...]:
        return tuple(Category.from_api(r) for r in self.client.get("/categories/") or [])

    def get_category(self, category_id: str) -> Category:
        return Category.from_api(self.client.get(f"/categories/id/{category_id}"))

    def create_category(self, name: str) -> Any:
        return self.client.post("/categories", params={"name": name})

    def update_category(self, category_id: str, name: str) -> Any:
        return self.client.put(f"/categories/{category_id}", params={"name": name})

    def delete_category(self, category_id: str) -> Any:
        return self.client.delete(f"/categories/id/{category_id}")

    # products
    def list_products(self) -> tuple[Product, ...]:
        return tuple(Product.from_api(r) for r in self.client.get("/products/") or [])

    def get_product(self, product_id: str) -> Product:
        return Product.from_api(self.client.get(f"/products/id/{product_id}"))

    def create_product(self, name: str, category_id: Optional[str] = None) -> Any:
        params = {"name": name}
        if category_id:
            params["category_id"] = category_id
        return self.client.post("/products/", params=params)

    def update_product(self, product_id: str, name: str) -> Any:
        return self.client.put(f"/products/id/{product_id}", {"name": name})

    def delete_product(self, product_id: str) -> Any:
        return self.client.delete(f"/products/{product_id}")

    # wallet
    def get_wallet(self) -> Wallet:
        return Wallet.from_api(self.client.get("/wallets/"))
