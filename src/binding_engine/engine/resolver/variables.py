"""
Variables visible to a node in an automation flow.

For a target node the resolver lists:
- outputs of every upstream node: observed outputs when the runtime has a
  recorded payload for the node, declared outputs from the capability lookup
  otherwise;
- loop variables of the target itself when it iterates over a collection;
- the globals pool: flow variables (names without a dot) and secrets
  (names starting with "env."), visible everywhere.

Secret values are never exposed. Secret entries carry the configured mask as
their preview, and secret values that appear inside any other preview are
redacted.

Example:
    >>> graph = DependencyGraph.from_edges(
    ...     [("n1", "n2")], nodes=[FlowNode(id="n1", type="calc"), FlowNode(id="n2")]
    ... )
    >>> lookup = CapabilityRegistry()
    >>> lookup.register(NodeType("calc", outputs=[OutputSpec(name="amount", type="number")]))
    >>> [entry.path for entry in resolve_variables(graph, lookup, "n2", {})]
    ['n1.amount']
"""

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..config import BindingConfig
from ..field_types import FieldType, infer_type_from_value
from ..preview import value_preview
from ..secrets import SecretRedactor, is_secret_path, mask, secret_name
from .capabilities import NodeCapabilityLookup, OutputSpec
from .graph import DependencyGraph, FlowNode
from .naming import friendly_name

logger = logging.getLogger(__name__)

FLOW_VARIABLE_LABEL = "Flow Variable"
SECRET_LABEL = "Secure Secret"
UNKNOWN_NODE_LABEL = "Unknown"

# Loop variables of an iterating node: (name, display name, type, description)
_LOOP_VARIABLES = (
    ("current", "Current Item", FieldType.UNKNOWN, "The current item being processed in the loop"),
    ("index", "Current Index", FieldType.NUMBER, "The current index in the loop iteration"),
    ("total", "Total Count", FieldType.NUMBER, "Total number of items in the loop"),
)

# Node id -> most recent output payload, or a callable doing the same lookup
ObservedOutputs = Mapping[str, Any] | Callable[[str], Any]


class VariableScope(str, Enum):
    """Where a variable comes from."""

    NODE = "node"
    LOOP = "loop"
    FLOW = "flow"
    SECRET = "secret"

    @property
    def is_global(self) -> bool:
        return self in (VariableScope.FLOW, VariableScope.SECRET)


class VariableEntry(BaseModel):
    """A variable a node can bind to."""

    model_config = {"frozen": True}

    path: str = Field(description="Binding path, e.g. 'n1.amount' or 'env.API_KEY'")
    friendly_name: str = Field(description="Display name")
    source_label: str = Field(description="Label of the producing node or global group")
    type: FieldType = Field(default=FieldType.UNKNOWN, description="Declared or inferred type")
    value_preview: str | None = Field(default=None, description="Short preview of the value")
    scope: VariableScope = Field(description="Variable origin")
    node_id: str | None = Field(default=None, description="Producing node id")
    description: str | None = Field(default=None, description="Optional description")
    observed: bool = Field(default=False, description="Backed by a recorded output payload")

    @property
    def binding(self) -> str:
        """Binding expression referencing this variable."""
        return f"{{{{{self.path}}}}}"


class VariableResolver:
    """
    Computes the variables visible to nodes of one graph snapshot.

    Args:
        graph: Dependency graph snapshot
        capability_lookup: Declared outputs per node type
        globals_pool: Flow variables and secrets, name -> value
        observed_outputs: Recorded output payloads per node id
        config: Presentation settings (mask, preview limits)
    """

    def __init__(
        self,
        graph: DependencyGraph,
        capability_lookup: NodeCapabilityLookup,
        globals_pool: Mapping[str, Any] | None = None,
        observed_outputs: ObservedOutputs | None = None,
        config: BindingConfig | None = None,
    ):
        self.graph = graph
        self.capability_lookup = capability_lookup
        self.globals_pool = dict(globals_pool or {})
        self.observed_outputs = observed_outputs
        self.config = config or BindingConfig()
        self.redactor = SecretRedactor.from_globals(self.globals_pool, self.config.secret_mask)

    def resolve(self, target_node_id: str) -> list[VariableEntry]:
        """
        Variables visible to a node.

        Entries are grouped: upstream node outputs (nearest node first), loop
        variables, then globals. Paths are unique. An unknown target yields
        an empty list.
        """
        if not self.graph.has_node(target_node_id):
            logger.debug(f"Cannot resolve variables for unknown node '{target_node_id}'")
            return []

        entries: list[VariableEntry] = []
        for node_id in self.graph.upstream_node_ids(target_node_id):
            entries.extend(self._node_entries(node_id))
        entries.extend(self._loop_entries(target_node_id))
        entries.extend(self._global_entries())

        unique: dict[str, VariableEntry] = {}
        for entry in entries:
            unique.setdefault(entry.path, entry)

        logger.debug(f"Resolved {len(unique)} variables for node '{target_node_id}'")
        return list(unique.values())

    def _preview(self, value: Any) -> str | None:
        # Redact before truncation so a cut-off secret cannot leak
        if isinstance(value, str):
            value = self.redactor.redact(value)
        preview = value_preview(
            value,
            max_length=self.config.preview_max_length,
            max_keys=self.config.preview_max_keys,
        )
        return self.redactor.redact(preview)

    def _observed_payload(self, node_id: str) -> Mapping[str, Any] | None:
        store = self.observed_outputs
        if store is None:
            return None
        try:
            payload = store.get(node_id) if isinstance(store, Mapping) else store(node_id)
        except Exception as e:
            logger.warning(f"Observed output lookup failed for node '{node_id}': {e}")
            return None
        if isinstance(payload, Mapping) and payload:
            return payload
        return None

    def _declared_outputs(self, node: FlowNode | None, node_id: str) -> list[OutputSpec]:
        node_type = node.type if node is not None else None
        inputs = node.inputs if node is not None else {}
        try:
            outputs = self.capability_lookup.declared_outputs(node_type, inputs)
        except Exception as e:
            logger.warning(f"Capability lookup failed for node '{node_id}' ({node_type}): {e}")
            return []

        specs: list[OutputSpec] = []
        for output in outputs or ():
            try:
                specs.append(OutputSpec.coerce(output))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed output of node '{node_id}': {output!r} ({e})")
        return specs

    def _display_name(self, node: FlowNode | None, path: str, output_name: str) -> str:
        if node is not None:
            alias = node.output_aliases.get(path) or node.output_aliases.get(output_name)
            if alias:
                return alias
        return friendly_name(path)

    def _node_entries(self, node_id: str) -> list[VariableEntry]:
        node = self.graph.node(node_id)
        source_label = node.display_label if node is not None else UNKNOWN_NODE_LABEL
        declared = self._declared_outputs(node, node_id)
        payload = self._observed_payload(node_id)

        entries: list[VariableEntry] = []
        if payload is not None:
            declared_by_name = {output.name: output for output in declared}
            for key, value in payload.items():
                output_name = str(key)
                path = f"{node_id}.{output_name}"
                spec = declared_by_name.get(output_name)
                field_type = (
                    spec.type
                    if spec is not None and spec.type is not FieldType.UNKNOWN
                    else infer_type_from_value(value)
                )
                entries.append(
                    VariableEntry(
                        path=path,
                        friendly_name=self._display_name(node, path, output_name),
                        source_label=source_label,
                        type=field_type,
                        value_preview=self._preview(value),
                        scope=VariableScope.NODE,
                        node_id=node_id,
                        description=spec.description if spec is not None else None,
                        observed=True,
                    )
                )
            return entries

        for output in declared:
            path = f"{node_id}.{output.name}"
            entries.append(
                VariableEntry(
                    path=path,
                    friendly_name=self._display_name(node, path, output.name),
                    source_label=source_label,
                    type=output.type,
                    scope=VariableScope.NODE,
                    node_id=node_id,
                    description=output.description,
                )
            )
        return entries

    def _loop_entries(self, target_node_id: str) -> list[VariableEntry]:
        node = self.graph.node(target_node_id)
        if node is None or not node.loop_enabled:
            return []

        return [
            VariableEntry(
                path=f"{target_node_id}._loop.{name}",
                friendly_name=display,
                source_label=f"{node.display_label} Loop",
                type=field_type,
                scope=VariableScope.LOOP,
                node_id=target_node_id,
                description=description,
            )
            for name, display, field_type, description in _LOOP_VARIABLES
        ]

    def _global_entries(self) -> list[VariableEntry]:
        entries: list[VariableEntry] = []
        for name, value in self.globals_pool.items():
            if is_secret_path(name):
                entries.append(
                    VariableEntry(
                        path=name,
                        friendly_name=secret_name(name),
                        source_label=SECRET_LABEL,
                        type=FieldType.TEXT,
                        value_preview=mask(value, self.config.secret_mask),
                        scope=VariableScope.SECRET,
                        description="Encrypted secret",
                    )
                )
            elif isinstance(name, str) and name and "." not in name:
                entries.append(
                    VariableEntry(
                        path=name,
                        friendly_name=name,
                        source_label=FLOW_VARIABLE_LABEL,
                        type=infer_type_from_value(value),
                        value_preview=self._preview(value),
                        scope=VariableScope.FLOW,
                    )
                )
            else:
                logger.warning(f"Skipping global variable with unsupported name: {name!r}")
        return entries


def resolve_variables(
    graph: DependencyGraph,
    capability_lookup: NodeCapabilityLookup,
    target_node_id: str,
    globals_pool: Mapping[str, Any] | None = None,
    observed_outputs: ObservedOutputs | None = None,
    config: BindingConfig | None = None,
) -> list[VariableEntry]:
    """Variables visible to target_node_id; see VariableResolver.resolve()."""
    resolver = VariableResolver(
        graph,
        capability_lookup,
        globals_pool=globals_pool,
        observed_outputs=observed_outputs,
        config=config,
    )
    return resolver.resolve(target_node_id)


__all__ = [
    "VariableScope",
    "VariableEntry",
    "VariableResolver",
    "ObservedOutputs",
    "resolve_variables",
]
