"""
Node capability lookup: which outputs a node type declares.

The resolver only depends on the NodeCapabilityLookup interface. The
embedding application can implement it directly over its own plugin
registry, or populate the bundled CapabilityRegistry.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..field_types import FieldType, normalize_field_type

logger = logging.getLogger(__name__)


class OutputSpec(BaseModel):
    """Declared output of a node type."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1, description="Output name")
    type: FieldType = Field(default=FieldType.UNKNOWN, description="Declared semantic type")
    description: str | None = Field(default=None, description="Optional description")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> FieldType:
        return normalize_field_type(v)

    @classmethod
    def coerce(cls, raw: "OutputSpec | Mapping[str, Any] | str") -> "OutputSpec":
        """Accept an OutputSpec, a {name, type?, description?} mapping or a bare name."""
        if isinstance(raw, OutputSpec):
            return raw
        if isinstance(raw, str):
            return cls(name=raw)
        return cls.model_validate(dict(raw))


# Computes extra outputs from a node's configured inputs
DynamicOutputs = Callable[[Mapping[str, Any]], Iterable[OutputSpec | Mapping[str, Any] | str]]


@dataclass
class NodeType:
    """
    Capability description of one node type.

    Attributes:
        type_name: Node type identifier
        label: Display label
        outputs: Static outputs, always declared
        dynamic_outputs: Optional callable producing input-dependent outputs
    """

    type_name: str
    label: str | None = None
    outputs: list[OutputSpec] = field(default_factory=list)
    dynamic_outputs: DynamicOutputs | None = None

    def __post_init__(self) -> None:
        self.outputs = [OutputSpec.coerce(output) for output in self.outputs]


class NodeCapabilityLookup(ABC):
    """Interface consumed by the variable resolver."""

    @abstractmethod
    def declared_outputs(
        self, node_type: str | None, inputs: Mapping[str, Any] | None = None
    ) -> list[OutputSpec]:
        """
        Outputs a node of the given type declares.

        Args:
            node_type: Node type identifier (None for untyped nodes)
            inputs: The node's configured inputs

        Returns:
            Declared outputs; empty when the type is unknown
        """


def _merge_outputs(
    static: Iterable[OutputSpec], dynamic: Iterable[OutputSpec]
) -> list[OutputSpec]:
    merged: dict[str, OutputSpec] = {}
    for output in (*static, *dynamic):
        merged.setdefault(output.name, output)
    return list(merged.values())


class CapabilityRegistry(NodeCapabilityLookup):
    """
    In-memory registry of node types.

    Example:
        registry = CapabilityRegistry()
        registry.register(NodeType("http", outputs=[OutputSpec(name="status", type="number")]))
        registry.declared_outputs("http", {})
    """

    def __init__(self) -> None:
        self._types: dict[str, NodeType] = {}

    def register(self, node_type: NodeType) -> None:
        """
        Register a node type.

        Raises:
            ValueError: If the type name is already registered
        """
        if node_type.type_name in self._types:
            raise ValueError(f"Node type '{node_type.type_name}' already registered")
        self._types[node_type.type_name] = node_type
        logger.debug(f"Registered node type: {node_type.type_name}")

    def get(self, type_name: str) -> NodeType:
        """
        Get a registered node type.

        Raises:
            KeyError: If the type is not registered
        """
        if type_name not in self._types:
            raise KeyError(f"Node type '{type_name}' not registered")
        return self._types[type_name]

    def has(self, type_name: str) -> bool:
        return type_name in self._types

    def list_types(self) -> list[str]:
        return list(self._types.keys())

    def declared_outputs(
        self, node_type: str | None, inputs: Mapping[str, Any] | None = None
    ) -> list[OutputSpec]:
        if node_type is None or node_type not in self._types:
            return []
        entry = self._types[node_type]
        dynamic: list[OutputSpec] = []
        if entry.dynamic_outputs is not None:
            for raw in entry.dynamic_outputs(inputs or {}):
                try:
                    dynamic.append(OutputSpec.coerce(raw))
                except (TypeError, ValueError) as e:
                    logger.warning(
                        f"Skipping malformed dynamic output of '{node_type}': {raw!r} ({e})"
                    )
        return _merge_outputs(entry.outputs, dynamic)


__all__ = [
    "OutputSpec",
    "NodeType",
    "NodeCapabilityLookup",
    "CapabilityRegistry",
    "DynamicOutputs",
]
