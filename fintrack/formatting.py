from datetime import date, datetime
from typing import Union

NBSP = "\u00a0"

_SYMBOLS = {"PLN": "zł", "EUR": "€", "USD": "USD", "KZT": "₸"}


def format_currency(amount: float, currency: str = "PLN") -> str:
    """pl-PL style: ``1 234,56 zł`` with non-breaking spaces."""
    sign = "-" if amount < 0 else ""
    whole, frac = f"{abs(amount):,.2f}".split(".")
    whole = whole.replace(",", NBSP)
    # pl-PL leaves four-digit numbers ungrouped
    if len(whole) == 5 and whole[1] == NBSP:
        whole = whole.replace(NBSP, "")
    return f"{sign}{whole},{frac}{NBSP}{_SYMBOLS.get(currency, currency)}"


def format_signed(amount: float, tx_type: str, currency: str = "PLN") -> str:
    return ("+" if tx_type == "income" else "-") + format_currency(amount, currency)


def format_date(value: Union[str, date, datetime]) -> str:
    if isinstance(value, str):
        if not value:
            return "-"
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "-"
    return f"{value.strftime('%b')} {value.day}, {value.year}"
