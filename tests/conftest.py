"""Shared test configuration for binding-engine tests.

Provides:
- A field catalog covering every semantic type
- A fixed reference time for date formatting
- Capability registries and graphs used by resolver tests
- Isolation from any real configuration file on the test machine
"""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest

from binding_engine.engine.config import CONFIG_ENV_VAR
from binding_engine.engine.field_types import Field
from binding_engine.engine.resolver import (
    CapabilityRegistry,
    DependencyGraph,
    FlowNode,
    NodeType,
    OutputSpec,
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    """Point HOME at an empty directory and clear the config env var."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    yield home


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for relative dates and mock values."""
    return datetime(2024, 3, 10, 12, 0, 0)


@pytest.fixture
def fields() -> list[Field]:
    """Field catalog as returned by a data source."""
    return [
        Field(name="customer_name", type="string"),
        Field(name="email", type="email"),
        Field(name="total", type="number", description="Order total"),
        Field(name="quantity", type="integer"),
        Field(name="created_at", type="datetime"),
        Field(name="is_paid", type="boolean"),
        Field(name="metadata", type="json"),
    ]


@pytest.fixture
def registry() -> CapabilityRegistry:
    """Capability registry with a few node types."""
    registry = CapabilityRegistry()
    registry.register(
        NodeType(
            "calc",
            label="Calculator",
            outputs=[OutputSpec(name="amount", type="number", description="Computed amount")],
        )
    )
    registry.register(
        NodeType(
            "http",
            label="HTTP Request",
            outputs=[
                OutputSpec(name="status", type="number"),
                OutputSpec(name="body", type="object"),
            ],
        )
    )
    registry.register(
        NodeType(
            "form",
            label="Form",
            outputs=[OutputSpec(name="submittedAt", type="datetime")],
            dynamic_outputs=lambda inputs: inputs.get("fields", []),
        )
    )
    return registry


@pytest.fixture
def chain_graph() -> DependencyGraph:
    """A -> B -> C, with A a calculator and B an HTTP request."""
    return DependencyGraph.from_edges(
        [("A", "B"), ("B", "C")],
        nodes=[
            FlowNode(id="A", type="calc", label="Compute"),
            FlowNode(id="B", type="http", label="Fetch"),
            FlowNode(id="C", type="calc", label="Summarize"),
        ],
    )
