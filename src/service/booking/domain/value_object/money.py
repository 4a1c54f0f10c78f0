from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from src.platform.config.core_setting import settings


MoneyLike = Union[Decimal, int, str, float]

HUNDRED = Decimal('100')


def minor_unit() -> Decimal:
    """Smallest currency step, e.g. Decimal('0.01') for two decimal places"""
    return Decimal(1).scaleb(-settings.CURRENCY_DECIMAL_PLACES)


def to_money(value: MoneyLike) -> Decimal:
    # float goes through str so 0.1 stays 0.1 instead of its binary expansion
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return amount.quantize(minor_unit(), rounding=ROUND_HALF_UP)


def percentage_of(amount: Decimal, percentage: MoneyLike) -> Decimal:
    return to_money(amount * Decimal(str(percentage)) / HUNDRED)
