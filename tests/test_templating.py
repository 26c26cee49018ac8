"""Tests for Jinja2 template rendering with formatter filters."""

from datetime import datetime

import pytest

from binding_engine.engine.config import BindingConfig
from binding_engine.engine.templating import TemplateRenderer, render_template


class TestFormatterFilters:
    def test_catalog_formatters_are_filters(self) -> None:
        assert render_template("{{ price | currency_usd }}", {"price": 5}) == "$5.00"
        assert render_template("{{ name | titlecase }}", {"name": "ada lovelace"}) == "Ada Lovelace"

    def test_formatted_filter(self) -> None:
        context = {"created": datetime(2024, 1, 5)}

        result = render_template("{{ created | formatted('date_long') }}", context)
        assert result == "January 5, 2024"
        assert render_template("{{ 3.0 | formatted }}", {}) == "3"

    def test_locale_is_bound(self) -> None:
        renderer = TemplateRenderer(locale="de-DE")

        assert renderer.render("{{ x | decimal_2 }}", {"x": 1234.5}) == "1.234,50"
        assert renderer.render("{{ x | currency_usd }}", {"x": 1}) == "$1.00"

    def test_configured_locale(self) -> None:
        config = BindingConfig(locale="de-DE")

        assert TemplateRenderer(config=config).render("{{ x | decimal_2 }}", {"x": 1234.5}) == (
            "1.234,50"
        )
        assert render_template("{{ x | decimal_1 }}", {"x": 2.5}, config=config) == "2,5"
        assert TemplateRenderer(locale="en-US", config=config).locale == "en-US"

    def test_nested_attributes(self) -> None:
        context = {"order": {"total": 1234.56}}
        assert render_template("{{ order.total | currency_auto }}", context) == "$1,234.56"

    def test_loops_and_conditionals(self) -> None:
        template = (
            "{% for item in items %}{{ item | uppercase }}"
            "{% if not loop.last %},{% endif %}{% endfor %}"
        )
        assert render_template(template, {"items": ["a", "b"]}) == "A,B"


class TestUndefinedNames:
    def test_undefined_renders_empty(self) -> None:
        assert render_template("[{{ missing }}]", {}) == "[]"
        assert render_template("[{{ missing | uppercase }}]", {}) == "[]"

    def test_strict_mode_raises(self) -> None:
        with pytest.raises(ValueError, match="Failed to evaluate template"):
            render_template("{{ missing }}", {}, strict=True)

    def test_strict_mode_raises_through_filters(self) -> None:
        with pytest.raises(ValueError, match="'missing' is undefined"):
            render_template("{{ missing | uppercase }}", {}, strict=True)
        with pytest.raises(ValueError, match="'missing' is undefined"):
            render_template("{{ missing | formatted('decimal_2') }}", {}, strict=True)

    def test_undefined_through_formatted_filter(self) -> None:
        assert render_template("[{{ missing | formatted('decimal_2') }}]", {}) == "[]"


class TestErrors:
    def test_syntax_error(self) -> None:
        with pytest.raises(ValueError, match="Failed to evaluate template"):
            render_template("{{ x ", {"x": 1})

    def test_sandbox_blocks_internals(self) -> None:
        with pytest.raises(ValueError):
            render_template("{{ ().__class__.__bases__[0].__subclasses__() }}", {})
