"""
Fixed-locale number, currency and percent formatting.

Formatter objects are cached per (locale, style, currency, digits) so the
formatter engine can be called on every keystroke without rebuilding them.

Examples:
    >>> get_number_formatter("en-US", NumberStyle.CURRENCY, currency="USD").format(99.9)
    '$99.90'
    >>> get_number_formatter("de-DE", NumberStyle.CURRENCY, currency="EUR").format(1234.5)
    '1.234,50\\xa0€'
    >>> get_number_formatter("en-US", NumberStyle.PERCENT).format(0.125)
    '13%'
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from functools import lru_cache
from typing import Any

from .locales import CURRENCY_SYMBOLS, NBSP, LocaleSpec, resolve_locale


class NumberStyle(str, Enum):
    """Number presentation styles."""

    DECIMAL = "decimal"
    CURRENCY = "currency"
    PERCENT = "percent"


def coerce_number(value: Any) -> Decimal | None:
    """
    Coerce a raw value to a finite Decimal.

    Numbers (not booleans) are accepted directly; strings are accepted when
    their stripped text parses as a finite float. Everything else is None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr() is the shortest round-tripping form (0.1 -> "0.1")
        return Decimal(repr(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        try:
            return Decimal(text)
        except InvalidOperation:
            # float() accepts forms Decimal() rejects, e.g. "1_000"
            return Decimal(repr(parsed))
    return None


def _group_digits(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


@dataclass(frozen=True)
class NumberFormatter:
    """Formats numbers with one locale's separators and one style."""

    locale: LocaleSpec
    style: NumberStyle
    min_fraction_digits: int
    max_fraction_digits: int
    currency: str | None = None

    def format(self, value: Decimal | int | float) -> str:
        number = value if isinstance(value, Decimal) else Decimal(repr(value))
        if self.style is NumberStyle.PERCENT:
            number = number * 100

        quantum = Decimal(1).scaleb(-self.max_fraction_digits)
        with localcontext() as ctx:
            # Large magnitudes need enough precision to keep every integer digit
            ctx.prec = max(ctx.prec, number.adjusted() + self.max_fraction_digits + 2)
            rounded = number.quantize(quantum, rounding=ROUND_HALF_UP)
        negative = rounded < 0
        # copy_abs() ignores the context, so no digit is rounded away here
        integer_part, _, fraction_part = f"{rounded.copy_abs():f}".partition(".")

        # Trim optional trailing zeros down to the minimum fraction digits
        while len(fraction_part) > self.min_fraction_digits and fraction_part.endswith("0"):
            fraction_part = fraction_part[:-1]

        body = _group_digits(integer_part, self.locale.group_separator)
        if fraction_part:
            body = f"{body}{self.locale.decimal_separator}{fraction_part}"

        if self.style is NumberStyle.CURRENCY:
            code = self.currency or self.locale.currency
            symbol = CURRENCY_SYMBOLS.get(code, code)
            if self.locale.currency_prefix:
                body = f"{symbol}{body}"
            else:
                body = f"{body}{NBSP}{symbol}"
        elif self.style is NumberStyle.PERCENT:
            body = f"{body}{self.locale.percent_suffix}"

        return f"-{body}" if negative else body


@lru_cache(maxsize=128)
def get_number_formatter(
    locale: str | None,
    style: NumberStyle = NumberStyle.DECIMAL,
    *,
    currency: str | None = None,
    fraction_digits: int | None = None,
) -> NumberFormatter:
    """
    Get a cached formatter for a locale and style.

    Args:
        locale: Locale tag (unsupported tags fall back to en-US)
        style: Decimal, currency or percent
        currency: ISO currency code for the currency style (defaults to the
            locale's own currency)
        fraction_digits: Fixed fraction digits; defaults to 2 for currency,
            0 for percent and 0-3 for plain decimals

    Returns:
        NumberFormatter instance (shared between callers)
    """
    spec = resolve_locale(locale)
    if fraction_digits is not None:
        min_digits = max_digits = fraction_digits
    elif style is NumberStyle.CURRENCY:
        min_digits = max_digits = 2
    elif style is NumberStyle.PERCENT:
        min_digits = max_digits = 0
    else:
        min_digits, max_digits = 0, 3

    return NumberFormatter(
        locale=spec,
        style=style,
        min_fraction_digits=min_digits,
        max_fraction_digits=max_digits,
        currency=currency if style is NumberStyle.CURRENCY else None,
    )


__all__ = [
    "NumberStyle",
    "NumberFormatter",
    "coerce_number",
    "get_number_formatter",
]
