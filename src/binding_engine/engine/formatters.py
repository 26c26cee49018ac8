"""
Formatter engine: named value-to-string transforms for bound fields.

Formatters are referenced by id inside binding expressions
({{price|currency_usd}}) and grouped by category for pickers:

    basic     none
    string    uppercase, lowercase, capitalize, titlecase
    currency  currency_usd, currency_eur, currency_gbp, currency_auto
    number    decimal_0, decimal_1, decimal_2, percentage
    date      date_short, date_long, date_relative, time_short, datetime

format_value() is a total function: any formatter can be applied to any
value. Values that do not fit a formatter (text formatted as currency, a
number formatted as a date that is out of range, ...) degrade to plain
stringification, and unknown formatter ids behave like "none".
"""

import json
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from .date_format import coerce_datetime, format_date, format_relative
from .field_types import FieldType, normalize_field_type
from .locales import resolve_locale
from .number_format import NumberStyle, coerce_number, get_number_formatter
from .segments import IDENTITY_FORMATTER


class FormatterCategory(str, Enum):
    """Applicability category of a formatter."""

    BASIC = "basic"
    STRING = "string"
    CURRENCY = "currency"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class FormatterSpec:
    """Catalog entry describing one formatter."""

    id: str
    label: str
    category: FormatterCategory


FORMATTER_CATALOG: tuple[FormatterSpec, ...] = (
    FormatterSpec(IDENTITY_FORMATTER, "No Format", FormatterCategory.BASIC),
    FormatterSpec("uppercase", "UPPERCASE", FormatterCategory.STRING),
    FormatterSpec("lowercase", "lowercase", FormatterCategory.STRING),
    FormatterSpec("capitalize", "Capitalize", FormatterCategory.STRING),
    FormatterSpec("titlecase", "Title Case", FormatterCategory.STRING),
    FormatterSpec("currency_usd", "$ USD", FormatterCategory.CURRENCY),
    FormatterSpec("currency_eur", "€ EUR", FormatterCategory.CURRENCY),
    FormatterSpec("currency_gbp", "£ GBP", FormatterCategory.CURRENCY),
    FormatterSpec("currency_auto", "Auto Currency", FormatterCategory.CURRENCY),
    FormatterSpec("decimal_0", "Integer", FormatterCategory.NUMBER),
    FormatterSpec("decimal_1", "1 Decimal", FormatterCategory.NUMBER),
    FormatterSpec("decimal_2", "2 Decimals", FormatterCategory.NUMBER),
    FormatterSpec("percentage", "Percent %", FormatterCategory.NUMBER),
    FormatterSpec("date_short", "Short Date", FormatterCategory.DATE),
    FormatterSpec("date_long", "Long Date", FormatterCategory.DATE),
    FormatterSpec("date_relative", "Relative", FormatterCategory.DATE),
    FormatterSpec("time_short", "Time", FormatterCategory.DATE),
    FormatterSpec("datetime", "Date & Time", FormatterCategory.DATE),
)

_CATALOG_BY_ID = {spec.id: spec for spec in FORMATTER_CATALOG}

# Fixed locale and currency per explicit currency formatter
_CURRENCY_FORMATTERS = {
    "currency_usd": ("en-US", "USD"),
    "currency_eur": ("de-DE", "EUR"),
    "currency_gbp": ("en-GB", "GBP"),
}

_DECIMAL_FORMATTERS = {
    "decimal_0": 0,
    "decimal_1": 1,
    "decimal_2": 2,
}

_WHITESPACE_SPLIT = re.compile(r"(\s+)")


def get_formatter(formatter_id: str | None) -> FormatterSpec | None:
    """Catalog entry for an id, or None when the id is unknown."""
    if not isinstance(formatter_id, str):
        return None
    return _CATALOG_BY_ID.get(formatter_id)


def stringify(value: Any) -> str:
    """
    Best-effort string conversion used by the identity formatter.

    Examples:
        >>> stringify(None)
        ''
        >>> stringify(True)
        'true'
        >>> stringify(3.0)
        '3'
        >>> stringify({"a": 1})
        '{"a":1}'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            # Circular structures or non-string keys
            return str(value)
    return str(value)


def _capitalize_word(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _titlecase(text: str) -> str:
    return "".join(
        part if part.isspace() else _capitalize_word(part)
        for part in _WHITESPACE_SPLIT.split(text)
    )


_STRING_TRANSFORMS: dict[str, Callable[[str], str]] = {
    "uppercase": str.upper,
    "lowercase": str.lower,
    "capitalize": _capitalize_word,
    "titlecase": _titlecase,
}


def _format_number(value: Any, formatter_id: str, locale: str | None) -> str:
    number = coerce_number(value)
    if number is None:
        return stringify(value)

    if formatter_id in _CURRENCY_FORMATTERS:
        currency_locale, currency = _CURRENCY_FORMATTERS[formatter_id]
        formatter = get_number_formatter(
            currency_locale, NumberStyle.CURRENCY, currency=currency
        )
    elif formatter_id == "currency_auto":
        spec = resolve_locale(locale)
        formatter = get_number_formatter(spec.tag, NumberStyle.CURRENCY, currency=spec.currency)
    elif formatter_id == "percentage":
        # Values are stored on a 0-100 scale
        formatter = get_number_formatter(locale, NumberStyle.PERCENT)
        number = number / 100
    else:
        formatter = get_number_formatter(
            locale, NumberStyle.DECIMAL, fraction_digits=_DECIMAL_FORMATTERS[formatter_id]
        )
    return formatter.format(number)


def _format_date(value: Any, formatter_id: str, locale: str | None, now: datetime | None) -> str:
    moment = coerce_datetime(value)
    if moment is None:
        return stringify(value)
    try:
        if formatter_id == "date_relative":
            return format_relative(moment, now)
        return format_date(moment, formatter_id, locale)
    except (OverflowError, OSError, ValueError):
        # Timezone lookups on out-of-range dates
        return stringify(value)


def format_value(
    value: Any,
    formatter_id: str | None,
    locale: str | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """
    Format a raw value with a formatter from the catalog.

    Args:
        value: Raw field value (any type, including None)
        formatter_id: Formatter id; None and unknown ids stringify
        locale: Locale tag for locale-default formatters (decimals, percent,
            currency_auto, dates). Explicit currency formatters use their own
            fixed locale.
        now: Reference time for date_relative (defaults to the current time)

    Returns:
        Display string; never raises

    Examples:
        >>> format_value(99.9, "currency_usd")
        '$99.90'
        >>> format_value("hello world", "titlecase")
        'Hello World'
        >>> format_value(12.5, "percentage")
        '13%'
        >>> format_value("n/a", "currency_usd")
        'n/a'
    """
    if value is None:
        return ""

    spec = get_formatter(formatter_id)
    if spec is None or spec.category is FormatterCategory.BASIC:
        return stringify(value)

    if not isinstance(locale, str):
        locale = None

    if spec.category is FormatterCategory.STRING:
        return _STRING_TRANSFORMS[spec.id](stringify(value))
    if spec.category in (FormatterCategory.CURRENCY, FormatterCategory.NUMBER):
        return _format_number(value, spec.id, locale)
    return _format_date(value, spec.id, locale, now)


def formatters_for_field_type(field_type: FieldType | str | None) -> list[FormatterSpec]:
    """
    Formatters a picker should offer for a field of the given type.

    The identity formatter is always offered. Numeric fields additionally get
    currency and number formatters, date fields get date formatters, and all
    other types get string formatters. This is a picker convenience only;
    format_value() accepts any formatter for any value.

    Examples:
        >>> [f.id for f in formatters_for_field_type("date")][:2]
        ['none', 'date_short']
    """
    normalized = normalize_field_type(field_type)
    if normalized.is_numeric:
        categories = (FormatterCategory.CURRENCY, FormatterCategory.NUMBER)
    elif normalized.is_date:
        categories = (FormatterCategory.DATE,)
    else:
        categories = (FormatterCategory.STRING,)

    allowed = {FormatterCategory.BASIC, *categories}
    return [spec for spec in FORMATTER_CATALOG if spec.category in allowed]


def group_formatters(
    specs: Sequence[FormatterSpec],
) -> dict[FormatterCategory, list[FormatterSpec]]:
    """Group formatter specs by category, keeping catalog order."""
    grouped: dict[FormatterCategory, list[FormatterSpec]] = {}
    for spec in specs:
        grouped.setdefault(spec.category, []).append(spec)
    return grouped


__all__ = [
    "FormatterCategory",
    "FormatterSpec",
    "FORMATTER_CATALOG",
    "get_formatter",
    "stringify",
    "format_value",
    "formatters_for_field_type",
    "group_formatters",
]
