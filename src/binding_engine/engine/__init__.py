"""Binding expression engine core components.

Key Components:

- Segment/Expression: Immutable parsed form of a binding string
- parse/serialize: Codec between "Hello {{name|uppercase}}" and segments
- render_bindings: Runtime substitution of references from a record
- ExpressionEditor: Id-addressed editing session over one expression
- format_value: Formatter engine (string, currency, number and date formatters)
- formatters_for_field_type: Formatter picker filtering by field type
- value_preview/sample_preview: Previews for pickers and editors
- TemplateRenderer: Sandboxed Jinja2 with catalog formatters as filters
- resolve_variables: Variables visible to a node of a flow graph
- BindingConfigLoader: YAML configuration (locale, secret mask, previews)

Parsing and formatting never raise on malformed data: bad syntax is
literal text, unknown formatters stringify, and missing values stay
unresolved.
"""

from .codec import (
    extract_field_names,
    has_bindings,
    is_missing,
    lookup_value,
    parse,
    render_bindings,
    serialize,
    unresolved_fields,
)
from .config import BindingConfig, BindingConfigLoader
from .editor import ExpressionEditor, SegmentNotFoundError
from .field_types import Field, FieldType, infer_type_from_value, normalize_field_type
from .formatters import (
    FORMATTER_CATALOG,
    FormatterCategory,
    FormatterSpec,
    format_value,
    formatters_for_field_type,
    get_formatter,
    group_formatters,
    stringify,
)
from .preview import live_preview, mock_value, sample_preview, value_preview
from .resolver import (
    CapabilityRegistry,
    DependencyGraph,
    Edge,
    FlowNode,
    NodeCapabilityLookup,
    NodeType,
    OutputSpec,
    VariableEntry,
    VariableResolver,
    VariableScope,
    friendly_name,
    resolve_variables,
)
from .secrets import MASKED_PREVIEW, SecretRedactor, is_secret_path
from .segments import IDENTITY_FORMATTER, Expression, Segment, SegmentKind
from .templating import TemplateRenderer, render_template

__all__ = [
    # Segments
    "IDENTITY_FORMATTER",
    "SegmentKind",
    "Segment",
    "Expression",
    # Codec
    "parse",
    "serialize",
    "has_bindings",
    "extract_field_names",
    "unresolved_fields",
    "lookup_value",
    "is_missing",
    "render_bindings",
    # Editing
    "ExpressionEditor",
    "SegmentNotFoundError",
    # Fields
    "Field",
    "FieldType",
    "normalize_field_type",
    "infer_type_from_value",
    # Formatters
    "FORMATTER_CATALOG",
    "FormatterCategory",
    "FormatterSpec",
    "format_value",
    "formatters_for_field_type",
    "get_formatter",
    "group_formatters",
    "stringify",
    # Previews
    "value_preview",
    "mock_value",
    "sample_preview",
    "live_preview",
    # Secrets
    "MASKED_PREVIEW",
    "SecretRedactor",
    "is_secret_path",
    # Templating
    "TemplateRenderer",
    "render_template",
    # Resolver
    "resolve_variables",
    "VariableResolver",
    "VariableEntry",
    "VariableScope",
    "DependencyGraph",
    "FlowNode",
    "Edge",
    "NodeCapabilityLookup",
    "CapabilityRegistry",
    "NodeType",
    "OutputSpec",
    "friendly_name",
    # Configuration
    "BindingConfig",
    "BindingConfigLoader",
]
