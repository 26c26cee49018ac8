"""Secret detection, masking and redaction for variable previews.

Globals whose name starts with "env." are secrets. Their values are never
shown: the variable listing replaces the preview with a fixed mask, and any
secret value that leaks into another preview (an observed node output that
echoes an API key, for instance) is redacted.

Example:
    >>> redactor = SecretRedactor.from_globals({"env.API_KEY": "sk-1234567890"})
    >>> redactor.redact('"Bearer sk-1234567890"')
    '"Bearer ••••••••"'
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

SECRET_PREFIX = "env."

# Fixed mask, independent of the secret's length
MASKED_PREVIEW = "••••••••"

# Shorter values are too likely to collide with ordinary text
MIN_SECRET_LENGTH = 8


def is_secret_path(name: Any) -> bool:
    """True if a global variable name denotes a secret."""
    return isinstance(name, str) and name.startswith(SECRET_PREFIX)


def secret_name(name: str) -> str:
    """Secret name without the "env." prefix."""
    return name[len(SECRET_PREFIX) :] if is_secret_path(name) else name


def mask(value: Any, marker: str = MASKED_PREVIEW) -> str:
    """Preview of a secret value: always the marker, whatever the value."""
    return marker


class SecretRedactor:
    """Replaces known secret values inside preview strings.

    Attributes:
        marker: Replacement text
        pattern: Alternation of all redactable values, longest first, or None
            when no value is long enough to redact
    """

    def __init__(self, values: Iterable[Any], marker: str = MASKED_PREVIEW):
        self.marker = marker
        candidates = {
            str(value)
            for value in values
            if value is not None and len(str(value)) >= MIN_SECRET_LENGTH
        }
        if candidates:
            # Longest first so a secret containing another is replaced whole
            ordered = sorted(candidates, key=len, reverse=True)
            self.pattern: re.Pattern[str] | None = re.compile(
                "|".join(re.escape(value) for value in ordered)
            )
        else:
            self.pattern = None

    @classmethod
    def from_globals(
        cls, globals_pool: Mapping[str, Any] | None, marker: str = MASKED_PREVIEW
    ) -> "SecretRedactor":
        """Build a redactor over the secret entries of a globals pool."""
        values = [
            value for name, value in (globals_pool or {}).items() if is_secret_path(name)
        ]
        return cls(values, marker)

    def __bool__(self) -> bool:
        return self.pattern is not None

    def redact(self, text: str | None) -> str | None:
        if text is None or self.pattern is None:
            return text
        return self.pattern.sub(self.marker, text)


__all__ = [
    "SECRET_PREFIX",
    "MASKED_PREVIEW",
    "MIN_SECRET_LENGTH",
    "is_secret_path",
    "secret_name",
    "mask",
    "SecretRedactor",
]
