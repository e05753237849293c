"""Graph model for the workflow editor (stdlib dataclasses).

The editor exports a JSON object with `nodes` and `edges`. Parsing is
intentionally permissive:
- Unknown/extra fields are ignored.
- Malformed entries (missing ids, endpoints) are skipped.

Validation of graph *semantics* (one Source, one End, reachability) is the
compiler's job, not the loader's.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

SOURCE_LABEL = "source"
END_LABEL = "end"


class NodeKind(str, Enum):
    SOURCE = "source"
    END = "end"
    CUSTOM = "custom"


class ExecutionType(str, Enum):
    NORMAL = "normal"
    CONDITIONAL = "conditional"
    PARALLEL = "parallel"
    CYCLIC = "cyclic"


@dataclass(frozen=True)
class GraphNode:
    id: str
    kind: NodeKind = NodeKind.CUSTOM
    label: str = ""

    @property
    def is_sentinel(self) -> bool:
        return self.kind in (NodeKind.SOURCE, NodeKind.END)


@dataclass(frozen=True)
class GraphEdge:
    id: str
    source: str
    target: str
    # None = unspecified; the classifier derives the effective type.
    execution_type: Optional[ExecutionType] = None
    label: str = ""
    group: int = 1

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class Graph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[GraphNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def nodes_by_id(self) -> Dict[str, GraphNode]:
        return {n.id: n for n in self.nodes}


def _coerce_enum(value: Any, enum_cls: type[Enum]) -> Optional[Any]:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, dict):
        value = value.get("value")
    if not isinstance(value, str):
        return None
    s = value.strip().lower()
    # Pydantic (and other serializers) may stringify enums as "NodeKind.X".
    prefix = enum_cls.__name__.lower() + "."
    if s.startswith(prefix):
        s = s[len(prefix):]
    try:
        return enum_cls(s)
    except ValueError:
        return None


def _node_kind(raw: Dict[str, Any]) -> NodeKind:
    kind = _coerce_enum(raw.get("kind"), NodeKind) or _coerce_enum(raw.get("type"), NodeKind)
    return kind or NodeKind.CUSTOM


def _node_label(raw: Dict[str, Any], kind: NodeKind) -> str:
    if kind is NodeKind.SOURCE:
        return SOURCE_LABEL
    if kind is NodeKind.END:
        return END_LABEL
    label = raw.get("label")
    if not isinstance(label, str) or not label.strip():
        data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
        label = data.get("label")
    return label.strip() if isinstance(label, str) else ""


def _edge_group(raw: Dict[str, Any]) -> int:
    g = raw.get("group")
    if g is None:
        g = raw.get("groupIndex")
    try:
        gi = int(g) if g is not None and not isinstance(g, bool) else 1
    except (TypeError, ValueError):
        gi = 1
    return gi if gi >= 1 else 1


def _edge_execution_type(raw: Dict[str, Any]) -> Optional[ExecutionType]:
    et = _coerce_enum(raw.get("execution_type"), ExecutionType) or _coerce_enum(
        raw.get("executionType"), ExecutionType
    )
    if et is not None:
        return et
    # Legacy editor exports only carry an `animated` flag on branch edges.
    if raw.get("animated") is True:
        src = raw.get("source")
        return ExecutionType.CYCLIC if src is not None and src == raw.get("target") else ExecutionType.CONDITIONAL
    return None


def load_graph_json(raw: Any) -> Graph:
    """Parse an editor JSON object (dict) into a `Graph` snapshot.

    Also accepts Pydantic-like models by calling `model_dump()` or `dict()`.
    """
    if hasattr(raw, "model_dump"):
        # Prefer JSON mode so enums are dumped as their values.
        try:
            raw = raw.model_dump(mode="json")  # type: ignore[assignment]
        except TypeError:
            raw = raw.model_dump()  # type: ignore[assignment]
    elif hasattr(raw, "dict"):
        raw = raw.dict()  # type: ignore[assignment]

    if not isinstance(raw, dict):
        raise TypeError("Graph must be a JSON object (dict)")

    nodes: list[GraphNode] = []
    seen_nodes: set[str] = set()
    nodes_raw = raw.get("nodes")
    if isinstance(nodes_raw, list):
        for n in nodes_raw:
            if not isinstance(n, dict):
                continue
            nid = str(n.get("id") or "").strip()
            if not nid or nid in seen_nodes:
                continue
            seen_nodes.add(nid)
            kind = _node_kind(n)
            nodes.append(GraphNode(id=nid, kind=kind, label=_node_label(n, kind)))

    edges: list[GraphEdge] = []
    seen_edges: set[str] = set()
    edges_raw = raw.get("edges")
    if isinstance(edges_raw, list):
        for idx, e in enumerate(edges_raw):
            if not isinstance(e, dict):
                continue
            src = str(e.get("source") or "").strip()
            tgt = str(e.get("target") or "").strip()
            if not src or not tgt:
                continue
            eid = str(e.get("id") or "").strip() or f"edge-{idx + 1}"
            if eid in seen_edges:
                continue
            seen_edges.add(eid)
            label = e.get("label")
            edges.append(
                GraphEdge(
                    id=eid,
                    source=src,
                    target=tgt,
                    execution_type=_edge_execution_type(e),
                    label=label.strip() if isinstance(label, str) else "",
                    group=_edge_group(e),
                )
            )

    return Graph(nodes=nodes, edges=edges)


def graph_to_json(graph: Graph) -> Dict[str, Any]:
    """Inverse of `load_graph_json` (JSON-safe dict)."""
    return {
        "nodes": [{"id": n.id, "kind": n.kind.value, "label": n.label} for n in graph.nodes],
        "edges": [
            {
                "id": e.id,
                "source": e.source,
                "target": e.target,
                "execution_type": e.execution_type.value if e.execution_type is not None else None,
                "label": e.label,
                "group": e.group,
            }
            for e in graph.edges
        ],
    }
