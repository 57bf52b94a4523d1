"""
Currency helpers.

Client carts carry prices in major units (rupees, dollars). Stripe expects
integer amounts in the currency's smallest unit, so every conversion goes
through ``to_minor_units`` using the exponent Stripe documents for the
currency.
"""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple, Union

# https://docs.stripe.com/currencies#zero-decimal
ZERO_DECIMAL_CURRENCIES = frozenset({
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
})

# https://docs.stripe.com/currencies#three-decimal
THREE_DECIMAL_CURRENCIES = frozenset({"bhd", "jod", "kwd", "omr", "tnd"})

_CURRENCY_CODE = re.compile(r"^[a-z]{3}$")

Number = Union[int, float, Decimal]


def minor_unit_exponent(currency: str) -> int:
    """Number of decimal places in ``currency`` (0, 2 or 3)."""
    code = currency.lower() if isinstance(currency, str) else ""
    if not _CURRENCY_CODE.match(code):
        raise ValueError(f"'{currency}' is not an ISO 4217 currency code")

    if code in ZERO_DECIMAL_CURRENCIES:
        return 0
    if code in THREE_DECIMAL_CURRENCIES:
        return 3
    return 2


def to_minor_units(price: Number, currency: str) -> int:
    """Convert a major-unit price to an integer amount, rounding half up."""
    factor = Decimal(10) ** minor_unit_exponent(currency)
    amount = Decimal(str(price)) * factor
    if not amount.is_finite():
        raise ValueError(f"price must be a finite number, got {price}")
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def order_total(line_amounts: Iterable[Tuple[int, int]]) -> int:
    """Sum of ``unit_amount * quantity`` over ``(unit_amount, quantity)`` pairs."""
    return sum(unit_amount * quantity for unit_amount, quantity in line_amounts)
