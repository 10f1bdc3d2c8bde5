from dataclasses import dataclass
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Transaction:
    id: str
    org_id: str
    user_id: str
    type: str            # "income" or "expense"
    amount: float        # already multiplied by quantity
    category_id: str
    product_id: str
    created_at: str
    purchase_date: str   # falls back to created_at
    is_deleted: bool = False
    note: Optional[str] = None
    quantity: Optional[float] = None
    deleted_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Transaction":
        created_at = data.get("created_at", "")
        return cls(
            id=data["_id"],
            org_id=data.get("org_id", ""),
            user_id=data.get("user_id", ""),
            type=data["type"],
            amount=float(data.get("amount", 0)),
            category_id=data.get("category_id", ""),
            product_id=data.get("product_id", ""),
            created_at=created_at,
            purchase_date=data.get("purchase_date") or created_at,
            is_deleted=bool(data.get("is_deleted", False)),
            note=data.get("note"),
            quantity=data.get("quantity"),
            deleted_at=data.get("deleted_at"),
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    org_id: str = ""
    created_at: str = ""
    is_deleted: bool = False
    deleted_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Category":
        return cls(
            id=data["_id"],
            name=data["name"],
            org_id=data.get("org_id", ""),
            created_at=data.get("created_at", ""),
            is_deleted=bool(data.get("is_deleted", False)),
            deleted_at=data.get("deleted_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    org_id: str = ""
    created_at: str = ""
    is_deleted: bool = False
    category_id: Optional[str] = None  # optional link to a category
    deleted_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Product":
        return cls(
            id=data["_id"],
            name=data["name"],
            org_id=data.get("org_id", ""),
            created_at=data.get("created_at", ""),
            is_deleted=bool(data.get("is_deleted", False)),
            category_id=data.get("category_id"),
            deleted_at=data.get("deleted_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class Wallet:
    id: str
    org_id: str
    amount: float
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Wallet":
        return cls(
            id=data.get("_id", ""),
            org_id=data.get("org_id", ""),
            amount=float(data.get("amount", 0)),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass(frozen=True)
class EnrichedTransaction:
    transaction: Transaction
    category_name: str
    product_name: str

    # shortcuts used by the table view
    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def type(self) -> str:
        return self.transaction.type

    @property
    def amount(self) -> float:
        return self.transaction.amount

    @property
    def purchase_date(self) -> str:
        return self.transaction.purchase_date

    @property
    def note(self) -> Optional[str]:
        return self.transaction.note


@dataclass(frozen=True)
class BreakdownEntry:
    key: str          # category id or product id
    name: str
    total: float
    percentage: float


@dataclass(frozen=True)
class Summary:
    total_income: float
    total_expenses: float
    net_balance: float
    wallet_balance: float
    expense_by_category: tuple[BreakdownEntry, ...] = ()


@dataclass(frozen=True)
class References:
    products: tuple[Product, ...] = ()
    categories: tuple[Category, ...] = ()


@dataclass(frozen=True)
class Page:
    items: tuple[Transaction, ...]
    has_more: bool
    consumed: int = 0  # raw backend rows covered, deleted ones included


@dataclass(frozen=True)
class TransactionCreate:
    amount: float
    type: str
    category_name: str
    product_name: str
    purchase_date: str
    note: Optional[str] = None

    def to_api(self) -> dict:
        body = {
            "amount": self.amount,
            "type": self.type,
            "category_name": self.category_name,
            "product_name": self.product_name,
            "purchase_date": self.purchase_date,
        }
        if self.note:
            body["note"] = self.note
        return body


@dataclass(frozen=True)
class LoginResponse:
    access_token: str
    token_type: str = "bearer"
