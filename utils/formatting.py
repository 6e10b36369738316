from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from core.config import settings

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    """Coerce user/DB numbers to Decimal; None counts as zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() first so floats do not carry binary noise
    return Decimal(str(value))


def has_cents_precision(value: Decimal) -> bool:
    """True when ``value`` fits the two-decimal columns it is stored in."""
    return value == value.quantize(Decimal("0.01"))


def format_currency(value: Optional[Number], symbol: str = None, decimals: int = 0) -> str:
    """
    Format an amount the way the back office shows it: ``$1,200`` or ``-$100``.
    """
    amount = to_decimal(value)
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    quant = Decimal(1).scaleb(-decimals) if decimals else Decimal(1)
    rounded = abs(amount).quantize(quant, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 and rounded != 0 else ""
    return f"{sign}{symbol}{rounded:,.{decimals}f}"


def days_since(start: Optional[date], today: Optional[date] = None) -> int:
    """Whole days elapsed since ``start``; 0 when the date is unknown."""
    if start is None:
        return 0
    today = today or date.today()
    return (today - start).days


def month_start(day: date, months_back: int = 0) -> date:
    """First day of the month ``months_back`` months before ``day``."""
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)
