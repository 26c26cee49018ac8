"""Display names for variable paths."""

import re

_INDEX_SUFFIX = re.compile(r"\[\d+\]")

# Word boundaries: "userName" -> "user Name", "HTTPStatus" -> "HTTP Status"
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


def friendly_name(path: str) -> str:
    """
    Human-readable name for a variable path.

    Takes the final dotted segment, drops numeric index suffixes and splits
    camelCase, snake_case and kebab-case into title-cased words.

    Examples:
        >>> friendly_name("n1.firstName")
        'First Name'
        >>> friendly_name("node.items[0]")
        'Items'
        >>> friendly_name("api.HTTPStatus_code")
        'Http Status Code'
    """
    last = path.rsplit(".", 1)[-1] or path
    cleaned = _INDEX_SUFFIX.sub("", last)
    spaced = _CAMEL_BOUNDARY.sub(" ", cleaned)
    words = [word for word in _SEPARATORS.split(spaced) if word]
    if not words:
        return last
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


__all__ = ["friendly_name"]
