# 金额展示格式（es-CO）

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

NBSP = "\u00a0"


def format_cop(amount: Union[Decimal, int, float, str]) -> str:
    """
    Colombian peso display like the storefront's es-CO locale:
    "$ 12.000" (currency symbol, no-break space, '.' thousands separator, no decimals).
    """
    whole = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if whole < 0 else ""
    grouped = f"{abs(whole):,}".replace(",", ".")
    return f"{sign}${NBSP}{grouped}"
