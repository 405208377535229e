from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "CNY": "¥"}


def to_minor_units(value: float | int | str | Decimal) -> int:
    """Convert a dollar amount (12.34) to integer cents (1234).

    Goes through Decimal(str(value)) so 19.99 stores as 1999, not 1998.
    """
    return int((Decimal(str(value)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> float:
    return float(Decimal(int(cents)) / 100)


def format_currency(cents: int, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    amount = Decimal(int(cents)) / 100
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
