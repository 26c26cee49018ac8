"""Fixed locale rules used by the number and date formatters."""

import logging
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"

NBSP = "\u00a0"
NARROW_NBSP = "\u202f"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

_EN_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_DE_MONTHS = (
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
)
_FR_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)


@dataclass(frozen=True)
class LocaleSpec:
    """
    Number and calendar conventions of one locale.

    Date patterns are str.format templates over the fields produced by
    date_format._date_fields (d, dd, m, mm, yy, yyyy, month, h, hh, HH, MM,
    SS, ampm).
    """

    tag: str
    decimal_separator: str
    group_separator: str
    currency: str
    currency_prefix: bool
    percent_suffix: str
    months: tuple[str, ...]
    date_short: str
    date_long: str
    time_short: str
    datetime: str


_LOCALES: dict[str, LocaleSpec] = {
    "en-US": LocaleSpec(
        tag="en-US",
        decimal_separator=".",
        group_separator=",",
        currency="USD",
        currency_prefix=True,
        percent_suffix="%",
        months=_EN_MONTHS,
        date_short="{m}/{d}/{yy}",
        date_long="{month} {d}, {yyyy}",
        time_short="{h}:{MM} {ampm}",
        datetime="{m}/{d}/{yyyy}, {h}:{MM}:{SS} {ampm}",
    ),
    "en-GB": LocaleSpec(
        tag="en-GB",
        decimal_separator=".",
        group_separator=",",
        currency="GBP",
        currency_prefix=True,
        percent_suffix="%",
        months=_EN_MONTHS,
        date_short="{dd}/{mm}/{yy}",
        date_long="{d} {month} {yyyy}",
        time_short="{HH}:{MM}",
        datetime="{dd}/{mm}/{yyyy}, {HH}:{MM}:{SS}",
    ),
    "de-DE": LocaleSpec(
        tag="de-DE",
        decimal_separator=",",
        group_separator=".",
        currency="EUR",
        currency_prefix=False,
        percent_suffix=f"{NBSP}%",
        months=_DE_MONTHS,
        date_short="{d}.{m}.{yy}",
        date_long="{d}. {month} {yyyy}",
        time_short="{HH}:{MM}",
        datetime="{d}.{m}.{yyyy}, {HH}:{MM}:{SS}",
    ),
    "fr-FR": LocaleSpec(
        tag="fr-FR",
        decimal_separator=",",
        group_separator=NARROW_NBSP,
        currency="EUR",
        currency_prefix=False,
        percent_suffix=f"{NARROW_NBSP}%",
        months=_FR_MONTHS,
        date_short="{dd}/{mm}/{yy}",
        date_long="{d} {month} {yyyy}",
        time_short="{HH}:{MM}",
        datetime="{dd}/{mm}/{yyyy} {HH}:{MM}:{SS}",
    ),
}

# Bare language tags resolve to their default region
_LANGUAGE_DEFAULTS = {
    "en": "en-US",
    "de": "de-DE",
    "fr": "fr-FR",
}

SUPPORTED_LOCALES = tuple(_LOCALES)


def canonical_locale_tag(tag: str | None) -> str | None:
    """
    Canonical supported tag for a locale string, or None if unsupported.

    Matching ignores case and accepts "_" as separator:
        "en_gb" -> "en-GB", "DE" -> "de-DE", "xx-YY" -> None
    """
    if not tag or not isinstance(tag, str):
        return None
    normalized = tag.strip().replace("_", "-")
    for known in _LOCALES:
        if known.lower() == normalized.lower():
            return known
    return _LANGUAGE_DEFAULTS.get(normalized.split("-")[0].lower())


@lru_cache(maxsize=32)
def resolve_locale(tag: str | None = None) -> LocaleSpec:
    """Resolve a locale tag to its rules, falling back to en-US."""
    canonical = canonical_locale_tag(tag)
    if canonical is None:
        if tag:
            logger.debug(f"Unsupported locale '{tag}', falling back to {DEFAULT_LOCALE}")
        canonical = DEFAULT_LOCALE
    return _LOCALES[canonical]


__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LOCALES",
    "CURRENCY_SYMBOLS",
    "LocaleSpec",
    "canonical_locale_tag",
    "resolve_locale",
]
