"""
Graph variable resolver package.

Lists the variables a node of an automation flow can bind to: outputs of
every upstream node, loop variables of iterating nodes, and the globals pool
of flow variables and masked secrets.

Public API:
    - resolve_variables: Functional entry point
    - VariableResolver: Resolver over one graph snapshot
    - VariableEntry: One bindable variable
    - DependencyGraph: Nodes and edges with cycle-safe upstream search
    - NodeCapabilityLookup: Interface for declared node outputs
    - CapabilityRegistry: In-memory NodeCapabilityLookup
    - friendly_name: Display name for a variable path
"""

from .capabilities import CapabilityRegistry, NodeCapabilityLookup, NodeType, OutputSpec
from .graph import DependencyGraph, Edge, FlowNode
from .naming import friendly_name
from .variables import VariableEntry, VariableResolver, VariableScope, resolve_variables

__all__ = [
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
]
