"""
Expression codec: binding strings <-> segment lists.

Binding syntax:
    {{fieldName}}             bare reference
    {{fieldName|formatter}}   reference with a formatter id

A reference is "{{", a name of one or more characters other than "}" and
"|", optionally "|" and a formatter of one or more characters other than
"}", then "}}". Anything that does not complete a reference is literal text,
so parsing never fails. There is no escape for a literal "{{".

A literal ending in "{" directly before a reference merges into the
reference name: [Literal("{"), FieldRef("x")] serializes to "{{{x}}", which
parses back as FieldRef("{x").

Examples:
    >>> serialize(parse("Hello {{name}}!")) == "Hello {{name}}!"
    True
    >>> [s.field_name for s in parse("{{a}} and {{b|uppercase}}").field_refs()]
    ['a', 'b']
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .field_types import Field
from .formatters import format_value
from .segments import Expression, Segment

_OPEN = "{{"
_CLOSE = "}}"

# Quick pre-check equivalent to "contains a completable reference"
BINDING_PATTERN = re.compile(r"\{\{([^}|]+)(?:\|([^}]+))?\}\}")

_MISSING = object()


@dataclass(frozen=True)
class _Reference:
    """A reference located in raw text."""

    start: int
    end: int
    name: str
    formatter: str | None

    def source(self, raw: str) -> str:
        return raw[self.start : self.end]


def _read_reference(raw: str, start: int) -> _Reference | None:
    """
    Reference state of the scanner: read one reference opening at start.

    Returns None when the text at start does not complete a reference; the
    caller then treats the opening brace as literal text.
    """
    pos = start + len(_OPEN)
    length = len(raw)

    name_start = pos
    while pos < length and raw[pos] not in "}|":
        pos += 1
    if pos == name_start:
        return None
    name = raw[name_start:pos]

    formatter = None
    if pos < length and raw[pos] == "|":
        pos += 1
        formatter_start = pos
        while pos < length and raw[pos] != "}":
            pos += 1
        if pos == formatter_start:
            return None
        formatter = raw[formatter_start:pos]

    if not raw.startswith(_CLOSE, pos):
        return None
    return _Reference(start=start, end=pos + len(_CLOSE), name=name, formatter=formatter)


def _scan(raw: str) -> Iterable[str | _Reference]:
    """
    Literal state of the scanner.

    Yields literal text runs and references in order, scanning left to right
    without overlap. Empty literal runs are never yielded.
    """
    literal_start = 0
    pos = raw.find(_OPEN)
    while pos != -1:
        reference = _read_reference(raw, pos)
        if reference is None:
            pos = raw.find(_OPEN, pos + 1)
            continue
        if pos > literal_start:
            yield raw[literal_start:pos]
        yield reference
        literal_start = reference.end
        pos = raw.find(_OPEN, literal_start)
    if literal_start < len(raw):
        yield raw[literal_start:]


def parse(raw: str | None) -> Expression:
    """
    Parse a binding string into an expression.

    Names and formatter ids are kept verbatim. Malformed syntax becomes
    literal text; None and "" yield an empty expression.

    Examples:
        >>> parse("Total: {{amount|currency_usd}}")[1].formatter
        'currency_usd'
        >>> parse("{{|x}}")[0].text
        '{{|x}}'
    """
    if not isinstance(raw, str) or not raw:
        return Expression()

    segments: list[Segment] = []
    for item in _scan(raw):
        if isinstance(item, str):
            segments.append(Segment.literal(item))
        else:
            segments.append(Segment.field_ref(item.name, item.formatter))
    return Expression.of(segments)


def serialize(expression: Expression | Iterable[Segment]) -> str:
    """
    Serialize segments back into a binding string.

    Literal segments contribute their raw text; references contribute
    {{name}} or {{name|formatter}}. The identity formatter is omitted.
    """
    parts: list[str] = []
    for segment in expression:
        if not segment.is_field_ref:
            parts.append(segment.text)
            continue
        formatter = segment.effective_formatter
        if formatter is None:
            parts.append(f"{_OPEN}{segment.field_name}{_CLOSE}")
        else:
            parts.append(f"{_OPEN}{segment.field_name}|{formatter}{_CLOSE}")
    return "".join(parts)


def has_bindings(raw: Any) -> bool:
    """True if the value is a string containing at least one reference."""
    return isinstance(raw, str) and BINDING_PATTERN.search(raw) is not None


def extract_field_names(raw: str | None) -> list[str]:
    """Referenced field names in order of first appearance."""
    return parse(raw).field_names()


def unresolved_fields(
    expression: Expression | str | None, fields: Sequence[Field] | None
) -> list[str]:
    """
    Referenced names that are absent from a field catalog.

    Args:
        expression: Parsed expression or raw binding string
        fields: Field catalog

    Returns:
        Missing names in order of first appearance
    """
    if not isinstance(expression, Expression):
        expression = parse(expression)
    known = {entry.name for entry in fields or ()}
    return [name for name in expression.field_names() if name not in known]


def _lookup_path(data: Any, path: str) -> Any:
    current = data
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return _MISSING
            current = current[part]
        elif isinstance(current, Sequence) and not isinstance(current, str) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def lookup_value(data: Mapping[str, Any], name: str) -> Any:
    """
    Find a field value in a record.

    Tries the exact key, then a case-insensitive key, then a dotted path
    through nested mappings and sequences.

    Returns:
        The value, or the module's missing sentinel when nothing matches
    """
    if name in data:
        return data[name]

    lowered = name.lower()
    for key in data:
        if isinstance(key, str) and key.lower() == lowered:
            return data[key]

    if "." in name:
        return _lookup_path(data, name)
    return _MISSING


def is_missing(value: Any) -> bool:
    """True for the sentinel returned by lookup_value() on a miss."""
    return value is _MISSING


def render_bindings(
    raw: str | Expression | None,
    data: Mapping[str, Any] | None,
    locale: str | None = None,
) -> str:
    """
    Substitute references with formatted values from a record.

    Names and formatter ids are trimmed before use. A reference whose value
    is missing stays in the output verbatim.

    Examples:
        >>> render_bindings("Hi {{ name }}: {{due|currency_usd}}", {"Name": "Ann", "due": 5})
        'Hi Ann: $5.00'
        >>> render_bindings("{{missing}}", {})
        '{{missing}}'
    """
    if isinstance(raw, Expression):
        raw = serialize(raw)
    if not isinstance(raw, str) or not raw:
        return ""
    if not data:
        return raw

    parts: list[str] = []
    for item in _scan(raw):
        if isinstance(item, str):
            parts.append(item)
            continue
        value = lookup_value(data, item.name.strip())
        if is_missing(value):
            parts.append(item.source(raw))
            continue
        formatter = item.formatter.strip() if item.formatter else None
        parts.append(format_value(value, formatter, locale))
    return "".join(parts)


__all__ = [
    "BINDING_PATTERN",
    "parse",
    "serialize",
    "has_bindings",
    "extract_field_names",
    "unresolved_fields",
    "lookup_value",
    "is_missing",
    "render_bindings",
]
