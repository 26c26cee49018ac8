"""
Interactive editing session over one binding expression.

The editor holds a mutable list of immutable segments and addresses them by
identity id, which survives updates and moves. Every mutation replaces the
affected Segment with a new one carrying the same id.

Example:
    editor = ExpressionEditor.from_string("Hello ")
    ref = editor.append(SegmentKind.FIELD_REF, field_name="name")
    editor.update(ref.id, formatter="uppercase")
    editor.to_string()   # "Hello {{name|uppercase}}"
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from .codec import parse, serialize
from .config import BindingConfig
from .field_types import Field
from .preview import sample_preview
from .segments import Expression, Segment, SegmentKind, new_segment_id

logger = logging.getLogger(__name__)


class SegmentNotFoundError(KeyError):
    """Raised when a segment id is not present in the editor."""

    def __init__(self, segment_id: str):
        super().__init__(segment_id)
        self.segment_id = segment_id

    def __str__(self) -> str:
        return f"Segment '{self.segment_id}' not found"


# Distinguishes "argument not passed" from an explicit None
_UNSET: Any = object()


class ExpressionEditor:
    """Mutable editing session over an expression."""

    def __init__(self, expression: Expression | Sequence[Segment] | None = None) -> None:
        self._segments: list[Segment] = []
        seen: set[str] = set()
        for segment in expression or ():
            if segment.id in seen:
                # Keep ids unique inside the session
                segment = Segment(
                    kind=segment.kind,
                    text=segment.text,
                    field_name=segment.field_name,
                    formatter=segment.formatter,
                    id=new_segment_id(),
                )
            seen.add(segment.id)
            self._segments.append(segment)

    @classmethod
    def from_string(cls, raw: str | None) -> "ExpressionEditor":
        return cls(parse(raw))

    @property
    def expression(self) -> Expression:
        """Immutable snapshot of the current segments."""
        return Expression.of(self._segments)

    @property
    def segments(self) -> list[Segment]:
        return list(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def _index_of(self, segment_id: str) -> int | None:
        for index, segment in enumerate(self._segments):
            if segment.id == segment_id:
                return index
        return None

    def get(self, segment_id: str) -> Segment:
        """
        Get a segment by id.

        Raises:
            SegmentNotFoundError: If no segment has this id
        """
        index = self._index_of(segment_id)
        if index is None:
            raise SegmentNotFoundError(segment_id)
        return self._segments[index]

    def append(
        self,
        kind: SegmentKind | str,
        *,
        text: str = "",
        field_name: str | None = None,
        formatter: str | None = None,
    ) -> Segment:
        """
        Append a new segment with a fresh id.

        Raises:
            ValueError: If a field reference is appended without a field name
        """
        segment = Segment(
            kind=SegmentKind(kind), text=text, field_name=field_name, formatter=formatter
        )
        self._segments.append(segment)
        return segment

    def update(
        self,
        segment_id: str,
        *,
        text: str = _UNSET,
        field_name: str | None = _UNSET,
        formatter: str | None = _UNSET,
    ) -> Segment | None:
        """
        Update fields of a segment in place, keeping its id.

        Setting a non-empty field_name on a literal turns it into a field
        reference; clearing field_name on a reference turns it back into an
        empty literal. text only applies to literals and formatter only to
        references.

        Returns:
            The updated segment, or None when the id is unknown

        Raises:
            ValueError: If the new field name or formatter contains characters
                that cannot be serialized
        """
        index = self._index_of(segment_id)
        if index is None:
            logger.debug(f"Ignoring update of unknown segment '{segment_id}'")
            return None
        current = self._segments[index]

        kind = current.kind
        new_text = current.text
        new_field = current.field_name
        new_formatter = current.formatter

        if field_name is not _UNSET:
            if field_name:
                kind = SegmentKind.FIELD_REF
                new_field = field_name
            elif current.is_field_ref:
                kind = SegmentKind.LITERAL
                new_field = None
                new_formatter = None
                new_text = ""

        if kind is SegmentKind.FIELD_REF:
            if formatter is not _UNSET:
                new_formatter = formatter
        elif text is not _UNSET:
            new_text = text

        updated = Segment(
            kind=kind,
            text=new_text,
            field_name=new_field,
            formatter=new_formatter,
            id=current.id,
        )
        self._segments[index] = updated
        return updated

    def remove(self, segment_id: str) -> bool:
        """Remove a segment; False when the id is unknown."""
        index = self._index_of(segment_id)
        if index is None:
            return False
        del self._segments[index]
        return True

    def move(self, from_index: int, to_index: int) -> bool:
        """
        Move the segment at from_index so it ends up at to_index.

        An out-of-range from_index is a no-op; to_index is clamped to the
        valid range.

        Returns:
            True if the list was changed
        """
        if not 0 <= from_index < len(self._segments):
            return False
        segment = self._segments.pop(from_index)
        to_index = max(0, min(to_index, len(self._segments)))
        self._segments.insert(to_index, segment)
        return from_index != to_index

    def clear(self) -> None:
        self._segments.clear()

    def to_string(self) -> str:
        return serialize(self._segments)

    def sample_preview(
        self,
        fields: Sequence[Field] | None = None,
        locale: str | None = None,
        now: datetime | None = None,
        *,
        config: BindingConfig | None = None,
    ) -> str:
        return sample_preview(self.expression, fields, locale, now, config=config)


__all__ = [
    "ExpressionEditor",
    "SegmentNotFoundError",
]
