"""
Segment and Expression models for binding expressions.

A binding expression is an ordered list of segments. Literal segments carry
raw text, field references carry a field name and an optional formatter id:

    "Hello {{name}}!"  ->  [LITERAL("Hello "), FIELD_REF("name"), LITERAL("!")]

Segments are immutable. Identity ids are issued at construction and never
reused; they exist so an editing session can address a segment, and they do
not take part in equality.
"""

import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

# Identity formatter id; a field reference with this formatter serializes bare
IDENTITY_FORMATTER = "none"

# Characters that would end a reference early when serialized
_NAME_RESERVED = "|}"
_FORMATTER_RESERVED = "}"


class SegmentKind(str, Enum):
    """Kinds of binding expression segments."""

    LITERAL = "text"
    NUMBER_LITERAL = "number"
    FIELD_REF = "field"

    @property
    def is_literal(self) -> bool:
        return self is not SegmentKind.FIELD_REF


def new_segment_id() -> str:
    """Issue a fresh segment identity id."""
    return f"seg_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Segment:
    """
    One atomic unit of a binding expression.

    Attributes:
        kind: Segment kind
        text: Raw literal text (LITERAL / NUMBER_LITERAL only)
        field_name: Referenced field (FIELD_REF only, never empty)
        formatter: Formatter id (FIELD_REF only)
        id: Identity id, excluded from equality
    """

    kind: SegmentKind
    text: str = ""
    field_name: str | None = None
    formatter: str | None = None
    id: str = field(default_factory=new_segment_id, compare=False)

    def __post_init__(self) -> None:
        if self.kind is SegmentKind.FIELD_REF:
            if not self.field_name:
                raise ValueError("Field reference segment requires a non-empty field_name")
            if any(char in self.field_name for char in _NAME_RESERVED):
                raise ValueError(
                    f"Field name must not contain '|' or '}}': {self.field_name!r}"
                )
            if self.formatter == "":
                object.__setattr__(self, "formatter", None)
            if self.formatter is not None and _FORMATTER_RESERVED in self.formatter:
                raise ValueError(f"Formatter must not contain '}}': {self.formatter!r}")
            if self.text:
                object.__setattr__(self, "text", "")
        else:
            # Literals never carry a binding or a formatter
            if self.field_name is not None:
                object.__setattr__(self, "field_name", None)
            if self.formatter is not None:
                object.__setattr__(self, "formatter", None)

    @classmethod
    def literal(cls, text: str) -> "Segment":
        return cls(kind=SegmentKind.LITERAL, text=text)

    @classmethod
    def number(cls, text: str) -> "Segment":
        return cls(kind=SegmentKind.NUMBER_LITERAL, text=text)

    @classmethod
    def field_ref(cls, field_name: str, formatter: str | None = None) -> "Segment":
        return cls(kind=SegmentKind.FIELD_REF, field_name=field_name, formatter=formatter)

    @property
    def is_field_ref(self) -> bool:
        return self.kind is SegmentKind.FIELD_REF

    @property
    def effective_formatter(self) -> str | None:
        """Formatter id, or None when the identity formatter is selected."""
        if self.formatter is None or self.formatter == IDENTITY_FORMATTER:
            return None
        return self.formatter

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.text == other.text
            and self.field_name == other.field_name
            and self.effective_formatter == other.effective_formatter
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.field_name, self.effective_formatter))


@dataclass(frozen=True)
class Expression:
    """Ordered, immutable sequence of segments."""

    segments: tuple[Segment, ...] = ()

    @classmethod
    def of(cls, segments: Iterable[Segment]) -> "Expression":
        return cls(segments=tuple(segments))

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    def __bool__(self) -> bool:
        return bool(self.segments)

    def field_refs(self) -> list[Segment]:
        """Field reference segments in expression order."""
        return [segment for segment in self.segments if segment.is_field_ref]

    def field_names(self) -> list[str]:
        """Referenced field names, in order of first appearance."""
        names: list[str] = []
        for segment in self.field_refs():
            if segment.field_name and segment.field_name not in names:
                names.append(segment.field_name)
        return names

    def normalized(self) -> "Expression":
        """
        Canonical form of this expression.

        Number literals become literals, adjacent literal runs merge, empty
        literals are dropped and identity formatters are cleared. This is the
        form parse() produces, so parse(serialize(e)) == e.normalized().
        """
        result: list[Segment] = []
        pending: list[str] = []

        def flush() -> None:
            text = "".join(pending)
            pending.clear()
            if text:
                result.append(Segment.literal(text))

        for segment in self.segments:
            if segment.kind.is_literal:
                pending.append(segment.text)
                continue
            flush()
            field_name = segment.field_name or ""
            result.append(Segment.field_ref(field_name, segment.effective_formatter))
        flush()
        return Expression(segments=tuple(result))


__all__ = [
    "IDENTITY_FORMATTER",
    "SegmentKind",
    "Segment",
    "Expression",
    "new_segment_id",
]
