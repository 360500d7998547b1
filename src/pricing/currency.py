"""Currency options, static default rates, conversion and display formatting.

Rates are relative to USD (the currency the pricing tables are in).
Conversion keeps full Decimal precision; only `format_currency` rounds.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from src.errors import ConfigurationError


class CurrencyOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    symbol: str
    rate: Decimal


CURRENCY_OPTIONS: list[CurrencyOption] = [
    CurrencyOption(value="USD", label="US Dollar ($)", symbol="$", rate=Decimal("1")),
    CurrencyOption(value="INR", label="Indian Rupee (₹)", symbol="₹", rate=Decimal("83.12")),
    CurrencyOption(value="EUR", label="Euro (€)", symbol="€", rate=Decimal("0.93")),
    CurrencyOption(value="GBP", label="British Pound (£)", symbol="£", rate=Decimal("0.79")),
    CurrencyOption(value="BRL", label="Brazilian Real (R$)", symbol="R$", rate=Decimal("4.97")),
    CurrencyOption(value="MXN", label="Mexican Peso (MX$)", symbol="MX$", rate=Decimal("17.05")),
    CurrencyOption(value="CAD", label="Canadian Dollar (C$)", symbol="C$", rate=Decimal("1.38")),
    CurrencyOption(value="AUD", label="Australian Dollar (A$)", symbol="A$", rate=Decimal("1.53")),
    CurrencyOption(value="NZD", label="New Zealand Dollar (NZ$)", symbol="NZ$", rate=Decimal("1.65")),
    CurrencyOption(value="TRY", label="Turkish Lira (₺)", symbol="₺", rate=Decimal("31.89")),
    CurrencyOption(value="EGP", label="Egyptian Pound (E£)", symbol="E£", rate=Decimal("30.90")),
    CurrencyOption(value="PLN", label="Polish Złoty (zł)", symbol="zł", rate=Decimal("4.00")),
    CurrencyOption(value="CNY", label="Chinese Yuan (¥)", symbol="¥", rate=Decimal("7.23")),
    CurrencyOption(value="JPY", label="Japanese Yen (¥)", symbol="¥", rate=Decimal("150.59")),
    CurrencyOption(value="THB", label="Thai Baht (฿)", symbol="฿", rate=Decimal("35.97")),
    CurrencyOption(value="PHP", label="Philippine Peso (₱)", symbol="₱", rate=Decimal("56.02")),
    CurrencyOption(value="MYR", label="Malaysian Ringgit (RM)", symbol="RM", rate=Decimal("4.73")),
]

DEFAULT_RATES: dict[str, Decimal] = {c.value: c.rate for c in CURRENCY_OPTIONS}

_SYMBOLS: dict[str, str] = {c.value: c.symbol for c in CURRENCY_OPTIONS}


def get_currency_symbol(code: str) -> str:
    """Symbol for a currency code; unknown codes fall back to "$"."""
    return _SYMBOLS.get(code.upper(), "$")


def default_rate(code: str) -> Decimal:
    """Static USD → `code` rate.

    Raises:
        ConfigurationError: the code is not in the static table.
    """
    try:
        return DEFAULT_RATES[code.upper()]
    except KeyError:
        msg = f"Unknown currency {code!r}; pass an explicit exchange rate"
        raise ConfigurationError(msg) from None


def convert(
    amount: Decimal,
    from_currency: str,
    to_currency: str,
    rates: dict[str, Decimal] | None,
) -> Decimal:
    """Convert through the common base of `rates`.

    Same currency or no rates → amount unchanged. A missing source rate
    counts as 1 (the base currency itself).
    """
    if from_currency == to_currency or not rates:
        return amount
    if to_currency not in rates:
        msg = f"No exchange rate for {to_currency!r}"
        raise ConfigurationError(msg)
    rate = rates[to_currency] / rates.get(from_currency, Decimal("1"))
    return amount * rate


def _group_indian(integer_digits: str) -> str:
    """12345678 → 1,23,45,678 (lakh/crore grouping)."""
    if len(integer_digits) <= 3:
        return integer_digits
    head, tail = integer_digits[:-3], integer_digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(
    amount: Decimal | int | float | None,
    currency: str = "USD",
    fraction_digits: int = 0,
) -> str:
    """Format for display: `$1,234`, `₹1,23,456`, `€99.50` (fraction_digits=2).

    Never shows more than 2 fraction digits.
    """
    if amount is None:
        return "-"
    digits = max(0, min(fraction_digits, 2))
    value = Decimal(str(amount)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{digits}f}"
    integer, _, fraction = text.partition(".")
    if currency.upper() == "INR":
        integer = _group_indian(integer)
    else:
        integer = f"{int(integer):,}"
    body = f"{integer}.{fraction}" if fraction else integer
    return f"{sign}{get_currency_symbol(currency)}{body}"
