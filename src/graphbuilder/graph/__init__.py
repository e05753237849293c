"""Graph model, editing session and edge classification."""

from .classifier import (
    DEFAULT_CONDITIONAL_LABEL,
    DEFAULT_PARALLEL_LABEL,
    BranchGroup,
    Classification,
    ClassifiedEdge,
    classify_edges,
    is_default_label,
)
from .models import ExecutionType, Graph, GraphEdge, GraphNode, NodeKind, graph_to_json, load_graph_json
from .session import GraphSession

__all__ = [
    "NodeKind",
    "ExecutionType",
    "GraphNode",
    "GraphEdge",
    "Graph",
    "load_graph_json",
    "graph_to_json",
    "GraphSession",
    "BranchGroup",
    "Classification",
    "ClassifiedEdge",
    "classify_edges",
    "is_default_label",
    "DEFAULT_CONDITIONAL_LABEL",
    "DEFAULT_PARALLEL_LABEL",
]
