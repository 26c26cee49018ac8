"""Tests for the formatter engine."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from binding_engine.engine.field_types import FieldType
from binding_engine.engine.formatters import (
    FORMATTER_CATALOG,
    FormatterCategory,
    format_value,
    formatters_for_field_type,
    get_formatter,
    group_formatters,
    stringify,
)

NBSP = "\u00a0"
NARROW_NBSP = "\u202f"


class TestCatalog:
    def test_catalog_ids(self) -> None:
        ids = [spec.id for spec in FORMATTER_CATALOG]

        assert ids == [
            "none",
            "uppercase",
            "lowercase",
            "capitalize",
            "titlecase",
            "currency_usd",
            "currency_eur",
            "currency_gbp",
            "currency_auto",
            "decimal_0",
            "decimal_1",
            "decimal_2",
            "percentage",
            "date_short",
            "date_long",
            "date_relative",
            "time_short",
            "datetime",
        ]

    def test_get_formatter(self) -> None:
        spec = get_formatter("currency_usd")

        assert spec is not None
        assert spec.category is FormatterCategory.CURRENCY
        assert get_formatter("bogus") is None
        assert get_formatter(None) is None

    def test_group_formatters_keeps_catalog_order(self) -> None:
        grouped = group_formatters(FORMATTER_CATALOG)

        assert list(grouped) == list(FormatterCategory)
        assert [s.id for s in grouped[FormatterCategory.STRING]][0] == "uppercase"


class TestIdentityAndStrings:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            ("text", "text"),
            (42, "42"),
            (3.0, "3"),
            (3.5, "3.5"),
            (True, "true"),
            (False, "false"),
            ({"a": 1}, '{"a":1}'),
            ([1, "x"], '[1,"x"]'),
            (date(2024, 1, 5), "2024-01-05"),
        ],
    )
    def test_identity_stringification(self, value: Any, expected: str) -> None:
        assert format_value(value, "none") == expected
        assert stringify(value) == expected

    def test_unknown_formatter_falls_back_to_identity(self) -> None:
        assert format_value(12.0, "bogus") == "12"
        assert format_value("abc", None) == "abc"

    def test_case_formatters(self) -> None:
        assert format_value("Hello World", "uppercase") == "HELLO WORLD"
        assert format_value("Hello World", "lowercase") == "hello world"
        assert format_value("hELLO wORLD", "capitalize") == "Hello world"

    def test_titlecase(self) -> None:
        assert format_value("hello world", "titlecase") == "Hello World"
        assert format_value("hELLO   wORLD", "titlecase") == "Hello   World"

    def test_string_formatters_stringify_non_strings(self) -> None:
        assert format_value(42, "uppercase") == "42"
        assert format_value(True, "uppercase") == "TRUE"


class TestCurrency:
    def test_usd(self) -> None:
        assert format_value(99.9, "currency_usd") == "$99.90"
        assert format_value(1234567.891, "currency_usd") == "$1,234,567.89"

    def test_eur_uses_german_rules(self) -> None:
        assert format_value(1234.5, "currency_eur") == f"1.234,50{NBSP}€"

    def test_gbp(self) -> None:
        assert format_value(1234.5, "currency_gbp") == "£1,234.50"

    def test_negative_amount(self) -> None:
        assert format_value(-5, "currency_usd") == "-$5.00"

    def test_explicit_currency_ignores_locale(self) -> None:
        assert format_value(5, "currency_usd", "de-DE") == "$5.00"

    def test_auto_currency_follows_locale(self) -> None:
        assert format_value(1234.56, "currency_auto") == "$1,234.56"
        assert format_value(1234.56, "currency_auto", "de-DE") == f"1.234,56{NBSP}€"
        assert format_value(1234.56, "currency_auto", "en_GB") == "£1,234.56"

    def test_numeric_strings_are_numbers(self) -> None:
        assert format_value(" 1234.5 ", "currency_usd") == "$1,234.50"

    def test_non_numeric_degrades_to_text(self) -> None:
        assert format_value("n/a", "currency_usd") == "n/a"
        assert format_value(True, "currency_usd") == "true"
        assert format_value([1, 2], "currency_usd") == "[1,2]"


class TestNumbers:
    def test_fixed_decimals(self) -> None:
        assert format_value(1234.5, "decimal_0") == "1,235"
        assert format_value(2.25, "decimal_1") == "2.3"
        assert format_value(3, "decimal_2") == "3.00"

    def test_rounds_half_away_from_zero(self) -> None:
        assert format_value(2.5, "decimal_0") == "3"
        assert format_value(-2.5, "decimal_0") == "-3"
        assert format_value(0.125, "decimal_2") == "0.13"

    def test_negative_zero_has_no_sign(self) -> None:
        assert format_value(-0.004, "decimal_2") == "0.00"

    def test_locale_separators(self) -> None:
        assert format_value(1234.5, "decimal_2", "de-DE") == "1.234,50"
        assert format_value(1234.5, "decimal_2", "fr-FR") == f"1{NARROW_NBSP}234,50"

    def test_unknown_locale_falls_back_to_en_us(self) -> None:
        assert format_value(1234.5, "decimal_2", "xx-YY") == "1,234.50"

    def test_percentage_divides_by_100(self) -> None:
        assert format_value(50, "percentage") == "50%"
        assert format_value(12.5, "percentage") == "13%"
        assert format_value("7", "percentage") == "7%"
        assert format_value(50, "percentage", "de-DE") == f"50{NBSP}%"

    def test_decimal_values(self) -> None:
        assert format_value(Decimal("0.1"), "decimal_1") == "0.1"
        assert format_value(Decimal("1E+3"), "decimal_0") == "1,000"


class TestDates:
    moment = datetime(2024, 1, 5, 15, 7, 9)

    def test_en_us_patterns(self) -> None:
        assert format_value(self.moment, "date_short") == "1/5/24"
        assert format_value(self.moment, "date_long") == "January 5, 2024"
        assert format_value(self.moment, "time_short") == "3:07 PM"
        assert format_value(self.moment, "datetime") == "1/5/2024, 3:07:09 PM"

    def test_other_locales(self) -> None:
        assert format_value(self.moment, "date_short", "en-GB") == "05/01/24"
        assert format_value(self.moment, "date_long", "de-DE") == "5. Januar 2024"
        assert format_value(self.moment, "time_short", "en-GB") == "15:07"

    def test_midnight_and_noon(self) -> None:
        assert format_value(datetime(2024, 1, 5, 0, 5), "time_short") == "12:05 AM"
        assert format_value(datetime(2024, 1, 5, 12, 0), "time_short") == "12:00 PM"

    def test_date_strings_are_parsed(self) -> None:
        assert format_value("2024-01-05", "date_long") == "January 5, 2024"
        assert format_value("2024-01-05T15:07:09", "time_short") == "3:07 PM"

    def test_date_objects(self) -> None:
        assert format_value(date(2024, 1, 5), "date_short") == "1/5/24"

    def test_numbers_are_epoch_milliseconds(self) -> None:
        assert format_value(0, "date_long") == "January 1, 1970"
        assert format_value(86_400_000, "date_short") == "1/2/70"

    def test_non_dates_degrade_to_text(self) -> None:
        assert format_value("hello", "date_short") == "hello"
        assert format_value(True, "date_long") == "true"
        assert format_value({"a": 1}, "datetime") == '{"a":1}'


class TestRelativeDates:
    now = datetime(2024, 3, 10, 12, 0)

    @pytest.mark.parametrize(
        "moment,expected",
        [
            (datetime(2024, 3, 10, 8, 0), "Today"),
            (datetime(2024, 3, 9, 9, 0), "Yesterday"),
            (datetime(2024, 3, 8, 9, 0), "2 days ago"),
            (datetime(2024, 3, 3, 12, 0), "1 week ago"),
            (datetime(2024, 2, 25, 12, 0), "2 weeks ago"),
            (datetime(2024, 1, 25, 12, 0), "1 month ago"),
            (datetime(2023, 3, 1, 12, 0), "1 year ago"),
            (datetime(2021, 3, 1, 12, 0), "3 years ago"),
            (datetime(2024, 3, 11, 12, 0), "Tomorrow"),
            (datetime(2024, 3, 13, 12, 0), "in 3 days"),
            (datetime(2024, 4, 20, 12, 0), "in 1 month"),
        ],
    )
    def test_phrases(self, moment: datetime, expected: str) -> None:
        assert format_value(moment, "date_relative", now=self.now) == expected

    def test_aware_datetimes(self) -> None:
        now = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
        moment = datetime(2024, 3, 7, 12, 0, tzinfo=timezone.utc)

        assert format_value(moment, "date_relative", now=now) == "3 days ago"

    def test_defaults_to_current_time(self) -> None:
        assert format_value(datetime.now(), "date_relative") == "Today"


class TestTotalFunction:
    """Every formatter accepts every value without raising."""

    values: list[Any] = [
        "text",
        "",
        "2024-01-05",
        0,
        -1,
        42,
        3.14,
        10**400,
        float("nan"),
        float("inf"),
        Decimal("1E+400"),
        None,
        True,
        {"a": 1},
        {"self": None},
        [1, 2, 3],
        (1, "a"),
        set(),
        object(),
        datetime(2024, 1, 5),
        date(2024, 1, 5),
        "9999-12-31T23:59:59-14:00",
        "0001-01-01T00:00:00+14:00",
    ]

    @pytest.mark.parametrize("formatter_id", [spec.id for spec in FORMATTER_CATALOG] + ["bogus"])
    def test_never_raises(self, formatter_id: str) -> None:
        for value in self.values:
            result = format_value(value, formatter_id)
            assert isinstance(result, str)

    @pytest.mark.parametrize("formatter_id", [spec.id for spec in FORMATTER_CATALOG])
    def test_aware_edge_dates_with_naive_now(self, formatter_id: str) -> None:
        now = datetime(2024, 1, 1)
        for value in ["9999-12-31T23:59:59-14:00", "0001-01-01T00:00:00+14:00"]:
            assert isinstance(format_value(value, formatter_id, now=now), str)

    @pytest.mark.parametrize("formatter_id", [spec.id for spec in FORMATTER_CATALOG])
    def test_identity_after_format_is_noop(self, formatter_id: str) -> None:
        now = datetime(2024, 1, 10)
        for value in ["hello world", 1234.5, datetime(2024, 1, 5), None, {"a": 1}]:
            formatted = format_value(value, formatter_id, now=now)
            assert format_value(formatted, "none") == formatted


class TestPickerFiltering:
    def test_numeric_fields(self) -> None:
        ids = {spec.id for spec in formatters_for_field_type(FieldType.NUMBER)}

        assert "none" in ids
        assert {"currency_usd", "decimal_2", "percentage"} <= ids
        assert "uppercase" not in ids
        assert "date_short" not in ids

    def test_date_fields(self) -> None:
        ids = [spec.id for spec in formatters_for_field_type("timestamp")]

        assert ids == ["none", "date_short", "date_long", "date_relative", "time_short", "datetime"]

    @pytest.mark.parametrize("field_type", ["text", "boolean", "object", None, "mystery"])
    def test_other_fields_get_string_formatters(self, field_type: str | None) -> None:
        ids = [spec.id for spec in formatters_for_field_type(field_type)]

        assert ids == ["none", "uppercase", "lowercase", "capitalize", "titlecase"]

    def test_filtering_does_not_restrict_format_value(self) -> None:
        assert format_value("hello", "currency_usd") == "hello"
