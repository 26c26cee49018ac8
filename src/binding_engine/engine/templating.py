"""
Jinja2 rendering for flow code fields.

Code-style fields in flows use full Jinja2 syntax rather than the plain
{{field|formatter}} binding syntax. Rendering happens in a sandbox and the
formatter catalog is available as filters, so both syntaxes share one set of
formatting rules:

    {{ order.total | currency_usd }}  ->  "$1,234.56"
    {{ customer.name | titlecase }}   ->  "Ada Lovelace"
    {{ created | formatted('date_long') }}
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from jinja2 import StrictUndefined, Undefined
from jinja2.sandbox import SandboxedEnvironment

from .config import BindingConfig
from .formatters import FORMATTER_CATALOG, format_value

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Sandboxed Jinja2 renderer with catalog formatters bound to one locale.

    Args:
        locale: Locale tag passed to every formatter filter; defaults to the
            configured locale
        strict: Raise on undefined names instead of rendering them empty
        config: Binding engine configuration
    """

    def __init__(
        self,
        locale: str | None = None,
        strict: bool = False,
        config: BindingConfig | None = None,
    ):
        if locale is None and config is not None:
            locale = config.locale
        self.locale = locale
        self.strict = strict
        self.env = SandboxedEnvironment(
            undefined=StrictUndefined if strict else Undefined,
            autoescape=False,
            trim_blocks=False,
            lstrip_blocks=False,
        )
        self._register_extensions()

    def _register_extensions(self) -> None:
        """Register catalog formatters as filters."""
        for spec in FORMATTER_CATALOG:
            self.env.filters[spec.id] = self._make_filter(spec.id)
        self.env.filters["formatted"] = self._formatted

        self.env.globals.update(
            {
                "now": lambda: datetime.now().isoformat(),
            }
        )

    def _make_filter(self, formatter_id: str):
        def _filter(value: Any) -> str:
            return format_value(_defined(value), formatter_id, self.locale)

        _filter.__name__ = formatter_id
        return _filter

    def _formatted(self, value: Any, formatter_id: str | None = None) -> str:
        return format_value(_defined(value), formatter_id, self.locale)

    def render(self, template_str: str, context: Mapping[str, Any] | None = None) -> str:
        """
        Render a template string.

        Raises:
            ValueError: If the template has a syntax error or fails to evaluate
        """
        try:
            template = self.env.from_string(template_str)
            return template.render(**dict(context or {}))
        except Exception as e:
            logger.debug(f"Template rendering failed: {e}")
            raise ValueError(f"Failed to evaluate template: {template_str}\nError: {str(e)}") from e


def _defined(value: Any) -> Any:
    """Undefined values format like None; in strict mode they raise."""
    if isinstance(value, StrictUndefined):
        value._fail_with_undefined_error()
    if isinstance(value, Undefined):
        return None
    return value


def render_template(
    template_str: str,
    context: Mapping[str, Any] | None = None,
    locale: str | None = None,
    strict: bool = False,
    config: BindingConfig | None = None,
) -> str:
    """Render a template with a one-off TemplateRenderer."""
    renderer = TemplateRenderer(locale=locale, strict=strict, config=config)
    return renderer.render(template_str, context)


__all__ = [
    "TemplateRenderer",
    "render_template",
]
