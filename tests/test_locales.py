"""Tests for locale resolution and the number/date building blocks."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from binding_engine.engine.date_format import coerce_datetime, format_relative
from binding_engine.engine.formatters import format_value
from binding_engine.engine.locales import (
    DEFAULT_LOCALE,
    SUPPORTED_LOCALES,
    canonical_locale_tag,
    resolve_locale,
)
from binding_engine.engine.number_format import NumberStyle, coerce_number, get_number_formatter


class TestLocaleResolution:
    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("en-US", "en-US"),
            ("en_gb", "en-GB"),
            ("DE-de", "de-DE"),
            ("de", "de-DE"),
            ("fr-CA", "fr-FR"),
            ("xx-YY", None),
            ("", None),
            (None, None),
        ],
    )
    def test_canonical_tags(self, tag: str | None, expected: str | None) -> None:
        assert canonical_locale_tag(tag) == expected

    def test_unsupported_locale_falls_back(self) -> None:
        assert resolve_locale("xx").tag == DEFAULT_LOCALE
        assert resolve_locale(None).tag == DEFAULT_LOCALE

    def test_supported_locales(self) -> None:
        assert set(SUPPORTED_LOCALES) == {"en-US", "en-GB", "de-DE", "fr-FR"}


class TestNumberCoercion:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (42, Decimal(42)),
            (0.1, Decimal("0.1")),
            (" 12.50 ", Decimal("12.50")),
            ("1e3", Decimal("1E+3")),
            (Decimal("2.5"), Decimal("2.5")),
        ],
    )
    def test_numbers(self, value: object, expected: Decimal) -> None:
        assert coerce_number(value) == expected

    @pytest.mark.parametrize(
        "value", [True, False, None, "", "abc", "nan", "inf", float("nan"), [1], Decimal("NaN")]
    )
    def test_non_numbers(self, value: object) -> None:
        assert coerce_number(value) is None


class TestNumberFormatter:
    def test_formatters_are_cached(self) -> None:
        first = get_number_formatter("en-US", NumberStyle.CURRENCY, currency="USD")
        second = get_number_formatter("en-US", NumberStyle.CURRENCY, currency="USD")

        assert first is second

    def test_default_fraction_digits(self) -> None:
        decimal = get_number_formatter("en-US")
        currency = get_number_formatter("en-US", NumberStyle.CURRENCY)

        assert decimal.format(1234.56789) == "1,234.568"
        assert decimal.format(5) == "5"
        assert currency.format(5) == "$5.00"

    def test_large_values_keep_all_digits(self) -> None:
        formatter = get_number_formatter("en-US", fraction_digits=2)
        assert formatter.format(Decimal("12345678901234567890123456789.5")) == (
            "12,345,678,901,234,567,890,123,456,789.50"
        )

    def test_values_beyond_default_precision(self) -> None:
        assert format_value(10**30 + 1, "decimal_0") == "1," + "000," * 9 + "001"
        assert format_value(1234567890123456789012345678901, "decimal_2") == (
            "1,234,567,890,123,456,789,012,345,678,901.00"
        )

    def test_percent_style_multiplies(self) -> None:
        assert get_number_formatter("en-US", NumberStyle.PERCENT).format(0.256) == "26%"


class TestDateCoercion:
    def test_datetime_passthrough(self) -> None:
        moment = datetime(2024, 1, 5, 10, 0)
        assert coerce_datetime(moment) is moment

    def test_date_becomes_midnight(self) -> None:
        assert coerce_datetime(date(2024, 1, 5)) == datetime(2024, 1, 5)

    def test_epoch_milliseconds_are_utc(self) -> None:
        assert coerce_datetime(1_000) == datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)

    def test_strings(self) -> None:
        assert coerce_datetime("2024-01-05 10:30") == datetime(2024, 1, 5, 10, 30)
        assert coerce_datetime("not-a-date-at-all") is None
        assert coerce_datetime("   ") is None

    @pytest.mark.parametrize("value", [None, True, float("nan"), 10**400, {"a": 1}, [2024]])
    def test_non_dates(self, value: object) -> None:
        assert coerce_datetime(value) is None

    def test_relative_with_mixed_awareness_does_not_raise(self) -> None:
        now = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert isinstance(format_relative(datetime(2024, 3, 1), now), str)

    def test_relative_at_calendar_edges_with_naive_now(self) -> None:
        now = datetime(2024, 1, 1)
        latest = coerce_datetime("9999-12-31T23:59:59-14:00")
        earliest = coerce_datetime("0001-01-01T00:00:00+14:00")

        assert latest is not None and earliest is not None
        assert format_relative(latest, now).startswith("in ")
        assert format_relative(earliest, now).endswith("years ago")
