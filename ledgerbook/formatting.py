"""Human readable rendering of amounts."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from enum import Enum

NBSP = "\u00a0"
PRECISION = 2
_QUANTUM = Decimal(1).scaleb(-PRECISION)


class CurrencyPosition(Enum):
    NONE = "none"
    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class FormatOptions:
    thousands_separator: str = NBSP
    decimal_separator: str = "."
    currency_symbol: str = ""
    currency_position: CurrencyPosition = CurrencyPosition.NONE


def _group(digits: str, separator: str) -> str:
    head = len(digits) % 3 or 3
    parts = [digits[:head]]
    parts.extend(digits[i : i + 3] for i in range(head, len(digits), 3))
    return separator.join(parts)


def format_amount(amount: Decimal, options: FormatOptions | None = None) -> str:
    """Format ``amount`` with two fraction digits and grouped thousands.

    >>> format_amount(Decimal("-1999.994"))
    '-1\\xa0999.99'
    """
    options = options or FormatOptions()
    rounded = Decimal(amount).quantize(_QUANTUM, rounding=ROUND_HALF_EVEN)
    text = format(abs(rounded), "f")
    integer, _, fraction = text.partition(".")
    sign = "-" if rounded < 0 else ""
    formatted = (
        f"{sign}{_group(integer, options.thousands_separator)}"
        f"{options.decimal_separator}{fraction}"
    )

    if options.currency_position is CurrencyPosition.PREFIX:
        return f"{options.currency_symbol}{formatted}"
    if options.currency_position is CurrencyPosition.SUFFIX:
        return f"{formatted}{options.currency_symbol}"
    return formatted
