"""
Previews of values and expressions.

Two kinds of preview exist:
- value previews: short, type-aware summaries of a variable's observed value
  ("Array[3]", "{id, name...}") shown next to variables in pickers;
- expression previews: an expression rendered either against mock values
  derived from the field catalog (sample preview) or against a real record
  (live preview).
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from .codec import parse, render_bindings
from .config import BindingConfig
from .field_types import Field, FieldType, find_field
from .formatters import format_value, stringify
from .segments import Expression

DEFAULT_PREVIEW_MAX_LENGTH = 30
DEFAULT_PREVIEW_MAX_KEYS = 2

SAMPLE_NUMBER = 1234.56
SAMPLE_PRICE = 99.99
SAMPLE_NAME = "John Doe"
SAMPLE_EMAIL = "john@example.com"
SAMPLE_TEXT = "Sample Value"


def value_preview(
    value: Any,
    max_length: int = DEFAULT_PREVIEW_MAX_LENGTH,
    max_keys: int = DEFAULT_PREVIEW_MAX_KEYS,
) -> str | None:
    """
    Short display summary of a value.

    Args:
        value: Observed value
        max_length: Strings longer than this are truncated with "..."
        max_keys: Number of mapping keys listed before "..."

    Returns:
        Preview text, or None for None and values with no useful summary

    Examples:
        >>> value_preview("hello")
        '"hello"'
        >>> value_preview([1, 2, 3])
        'Array[3]'
        >>> value_preview({"id": 1, "name": "x", "email": "y"})
        '{id, name...}'
    """
    if value is None:
        return None
    if isinstance(value, str):
        if len(value) > max_length:
            return f'"{value[:max_length]}..."'
        return f'"{value}"'
    if isinstance(value, (bool, int, float, Decimal)):
        return stringify(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        keys = [str(key) for key in value]
        more = "..." if len(keys) > max_keys else ""
        return "{" + ", ".join(keys[:max_keys]) + more + "}"
    if isinstance(value, (Sequence, set, frozenset)) and not isinstance(value, bytes):
        return f"Array[{len(value)}]"
    return None


def mock_value(
    field_name: str, fields: Sequence[Field] | None = None, now: datetime | None = None
) -> Any:
    """
    Sample value for a field, used when no real data is available.

    Declared number and date types win; otherwise the field name is
    matched against a few common patterns.
    """
    entry = find_field(fields, field_name)
    field_type = entry.type if entry is not None else FieldType.UNKNOWN

    if field_type is FieldType.NUMBER:
        return SAMPLE_NUMBER
    if field_type is FieldType.DATE:
        return now or datetime.now()

    lowered = field_name.lower()
    if "price" in lowered or "amount" in lowered:
        return SAMPLE_PRICE
    if "name" in lowered:
        return SAMPLE_NAME
    if "email" in lowered:
        return SAMPLE_EMAIL
    return SAMPLE_TEXT


def _effective_locale(locale: str | None, config: BindingConfig | None) -> str | None:
    if locale is None and config is not None:
        return config.locale
    return locale


def sample_preview(
    expression: Expression | str | None,
    fields: Sequence[Field] | None = None,
    locale: str | None = None,
    now: datetime | None = None,
    *,
    config: BindingConfig | None = None,
) -> str:
    """
    Render an expression with mock values in place of every reference.

    An explicit locale wins over the configured one.

    Examples:
        >>> sample_preview("Dear {{customer_name}}, total {{total|currency_usd}}",
        ...                [Field(name="total", type="number")])
        'Dear John Doe, total $1,234.56'
    """
    if not isinstance(expression, Expression):
        expression = parse(expression)
    locale = _effective_locale(locale, config)

    parts: list[str] = []
    for segment in expression:
        if not segment.is_field_ref:
            parts.append(segment.text)
            continue
        value = mock_value(segment.field_name or "", fields, now)
        parts.append(format_value(value, segment.effective_formatter, locale, now=now))
    return "".join(parts)


def live_preview(
    expression: Expression | str | None,
    record: Mapping[str, Any] | None,
    locale: str | None = None,
    *,
    config: BindingConfig | None = None,
) -> str:
    """Render an expression against a real record."""
    return render_bindings(expression, record, _effective_locale(locale, config))


__all__ = [
    "value_preview",
    "mock_value",
    "sample_preview",
    "live_preview",
]
