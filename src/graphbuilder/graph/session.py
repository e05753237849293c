"""Graph editing session (host-side, no UI).

Holds the mutable node/edge lists an editor works on and hands out immutable
`Graph` snapshots for compilation. Identifiers are allocated from per-session
counters (`node-N`, `edge-N`) and are never reused, even after deletions.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

from ..errors import InvalidGraph
from .models import END_LABEL, SOURCE_LABEL, ExecutionType, Graph, GraphEdge, GraphNode, NodeKind

SOURCE_NODE_ID = "source"
END_NODE_ID = "end"

_BRANCH_TYPES = (ExecutionType.CONDITIONAL, ExecutionType.PARALLEL)


class GraphSession:
    """An editable graph, seeded with the Source and End sentinels."""

    def __init__(self) -> None:
        self._nodes: Dict[str, GraphNode] = {
            SOURCE_NODE_ID: GraphNode(id=SOURCE_NODE_ID, kind=NodeKind.SOURCE, label=SOURCE_LABEL),
            END_NODE_ID: GraphNode(id=END_NODE_ID, kind=NodeKind.END, label=END_LABEL),
        }
        self._edges: List[GraphEdge] = []
        self._node_seq = 0
        self._edge_seq = 0

    @property
    def source_id(self) -> str:
        return SOURCE_NODE_ID

    @property
    def end_id(self) -> str:
        return END_NODE_ID

    def _require_node(self, node_id: str) -> GraphNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise InvalidGraph(f"Unknown node '{node_id}'")
        return node

    def _edge_index(self, edge_id: str) -> int:
        for i, e in enumerate(self._edges):
            if e.id == edge_id:
                return i
        raise InvalidGraph(f"Unknown edge '{edge_id}'")

    def add_node(self, label: Optional[str] = None) -> GraphNode:
        self._node_seq += 1
        seq = self._node_seq
        text = label.strip() if isinstance(label, str) and label.strip() else f"Node {seq}"
        node = GraphNode(id=f"node-{seq}", kind=NodeKind.CUSTOM, label=text)
        self._nodes[node.id] = node
        return node

    def rename_node(self, node_id: str, label: str) -> GraphNode:
        node = self._require_node(node_id)
        if node.is_sentinel:
            raise InvalidGraph(f"Sentinel node '{node_id}' cannot be renamed")
        renamed = replace(node, label=str(label or "").strip())
        self._nodes[node_id] = renamed
        return renamed

    def remove_node(self, node_id: str) -> None:
        node = self._require_node(node_id)
        if node.is_sentinel:
            raise InvalidGraph(f"Sentinel node '{node_id}' cannot be removed")
        del self._nodes[node_id]
        self._edges = [e for e in self._edges if e.source != node_id and e.target != node_id]

    def connect(
        self,
        source: str,
        target: str,
        *,
        execution_type: Optional[ExecutionType] = None,
        label: str = "",
        group: int = 1,
    ) -> GraphEdge:
        """Add an edge. Choosing a branch type retypes the whole sibling set."""
        self._require_node(source)
        self._require_node(target)
        if group < 1:
            raise InvalidGraph("group must be >= 1")
        if execution_type is None and source == target:
            execution_type = ExecutionType.CYCLIC

        self._edge_seq += 1
        edge = GraphEdge(
            id=f"edge-{self._edge_seq}",
            source=source,
            target=target,
            execution_type=execution_type,
            label=str(label or "").strip(),
            group=group,
        )
        self._edges.append(edge)
        if execution_type in _BRANCH_TYPES:
            self._retype_siblings(source, group, execution_type)
        return edge

    def _retype_siblings(self, source: str, group: int, execution_type: ExecutionType) -> None:
        self._edges = [
            replace(e, execution_type=execution_type) if e.source == source and e.group == group else e
            for e in self._edges
        ]

    def set_execution_type(self, edge_id: str, execution_type: Optional[ExecutionType]) -> GraphEdge:
        idx = self._edge_index(edge_id)
        edge = self._edges[idx]
        if execution_type in _BRANCH_TYPES:
            self._retype_siblings(edge.source, edge.group, execution_type)
        else:
            self._edges[idx] = replace(edge, execution_type=execution_type)
        return self._edges[idx]

    def relabel_group(self, source: str, label: str, *, group: int = 1) -> List[GraphEdge]:
        """Name the decision function of one branch-group (all siblings share it)."""
        text = str(label or "").strip()
        out: List[GraphEdge] = []
        for i, e in enumerate(self._edges):
            if e.source == source and e.group == group:
                self._edges[i] = replace(e, label=text)
                out.append(self._edges[i])
        if not out:
            raise InvalidGraph(f"No edges leave '{source}' in group {group}")
        return out

    def remove_edge(self, edge_id: str) -> None:
        del self._edges[self._edge_index(edge_id)]

    def snapshot(self) -> Graph:
        return Graph(nodes=list(self._nodes.values()), edges=list(self._edges))
