"""Graph snapshot → canonical `WorkflowSpec` compiler.

The compiler is a pure function of its inputs: it reads the snapshot, never
mutates it, and either returns a complete spec or raises. No partial output.

Edge ordering in the spec is fixed so repeated compilations diff cleanly:
1. direct edges leaving Source
2. direct edges entering End
3. remaining direct edges
4. conditional groups
5. parallel groups
Within each bucket edges keep their insertion order.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from ..errors import AmbiguousLabel, InvalidGraph
from ..logging import get_logger
from ..core.config import DEFAULT_SPEC_NAME
from ..core.names import RESERVED_NAMES, identifier_problem
from ..graph.classifier import Classification, classify_edges, is_default_label
from ..graph.models import ExecutionType, Graph, GraphEdge, GraphNode, NodeKind
from .spec import END, START, ConditionalEdge, DirectEdge, ParallelEdge, SpecEdge, SpecNode, WorkflowSpec

logger = get_logger(__name__)

_WS_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"\W+")


def normalize_label(label: Optional[str]) -> str:
    """Whitespace runs become underscores; everything else is kept verbatim."""
    return _WS_RE.sub("_", str(label or "").strip())


def node_name(node: GraphNode) -> str:
    """Generated identifier for a node (sentinels map to `__start__` / `__end__`)."""
    if node.kind is NodeKind.SOURCE:
        return START
    if node.kind is NodeKind.END:
        return END
    name = normalize_label(node.label)
    if not name:
        name = _NON_WORD_RE.sub("_", node.id).strip("_") or "node"
    return name


def _sentinel(nodes: List[GraphNode], kind: NodeKind) -> GraphNode:
    found = [n for n in nodes if n.kind is kind]
    if not found:
        raise InvalidGraph(f"Graph has no {kind.value} node")
    if len(found) > 1:
        raise InvalidGraph(f"Graph has {len(found)} {kind.value} nodes; exactly one is required")
    return found[0]


def _check_name(name: str, what: str) -> None:
    if name in RESERVED_NAMES or is_default_label(name):
        raise AmbiguousLabel(name, f"{what} uses the reserved name '{name}'")
    problem = identifier_problem(name)
    if problem is not None:
        raise InvalidGraph(f"{what} {problem}")


def _custom_names(nodes: List[GraphNode], edges: List[GraphEdge]) -> Dict[str, str]:
    """Generated names of the custom nodes that some edge touches.

    Unconnected nodes never reach the spec, so their labels are not checked.
    """
    connected = {e.source for e in edges} | {e.target for e in edges}
    names: Dict[str, str] = {}
    owners: Dict[str, str] = {}
    for n in nodes:
        if n.kind is not NodeKind.CUSTOM or n.id not in connected:
            continue
        name = node_name(n)
        _check_name(name, f"Node '{n.id}' label '{n.label}'")
        prev = owners.get(name)
        if prev is not None:
            raise AmbiguousLabel(name, f"Nodes '{prev}' and '{n.id}' share the label '{name}'")
        owners[name] = n.id
        names[n.id] = name
    return names


def _check_reachable(source_id: str, end_id: str, edges: List[GraphEdge]) -> None:
    adj: Dict[str, List[str]] = {}
    for e in edges:
        adj.setdefault(e.source, []).append(e.target)
    seen: set[str] = set()
    stack = [source_id]
    while stack:
        cur = stack.pop()
        if cur == end_id:
            return
        if cur in seen:
            continue
        seen.add(cur)
        stack.extend(t for t in adj.get(cur, []) if t not in seen)
    raise InvalidGraph("No path connects the source node to the end node")


def validate_graph(nodes: List[GraphNode], edges: List[GraphEdge]) -> Classification:
    """Check structural validity and return the edge classification."""
    source = _sentinel(nodes, NodeKind.SOURCE)
    end = _sentinel(nodes, NodeKind.END)

    ids = {n.id for n in nodes}
    for e in edges:
        if e.source not in ids or e.target not in ids:
            raise InvalidGraph(f"Edge '{e.id}' references an unknown node ({e.source} -> {e.target})")
        if e.target == source.id:
            raise InvalidGraph(f"Edge '{e.id}' points into the source node")
        if e.source == end.id:
            raise InvalidGraph(f"Edge '{e.id}' leaves the end node")

    names = _custom_names(nodes, edges)
    classification = classify_edges(edges)

    taken = set(names.values())
    for g in classification.groups:
        if g.label in taken or g.label in RESERVED_NAMES:
            raise AmbiguousLabel(g.label, f"Branch label '{g.label}' collides with a node or reserved name")
        problem = identifier_problem(g.label)
        if problem is not None:
            raise InvalidGraph(f"Branch label '{g.label}' {problem}")

    _check_reachable(source.id, end.id, edges)
    return classification


def compile_spec(
    nodes: Iterable[GraphNode],
    edges: Iterable[GraphEdge],
    *,
    name: str = DEFAULT_SPEC_NAME,
) -> WorkflowSpec:
    """Compile a node/edge snapshot into a canonical spec.

    Raises:
        InvalidGraph: missing/duplicated sentinels, dangling edges, or no Source→End path.
        AmbiguousLabel: two elements resolve to the same generated name.
    """
    node_list = list(nodes)
    edge_list = list(edges)
    classification = validate_graph(node_list, edge_list)
    by_id = {n.id: n for n in node_list}

    def _ref(node_id: str) -> str:
        return node_name(by_id[node_id])

    spec_nodes: list[str] = []
    for e in edge_list:
        for endpoint in (e.source, e.target):
            n = by_id[endpoint]
            if n.kind is NodeKind.CUSTOM:
                nm = node_name(n)
                if nm not in spec_nodes:
                    spec_nodes.append(nm)
    if name in spec_nodes or any(g.label == name for g in classification.groups):
        raise AmbiguousLabel(name, f"Workflow name '{name}' is also used by a node or branch")

    from_start: list[SpecEdge] = []
    into_end: list[SpecEdge] = []
    other: list[SpecEdge] = []
    for ce in classification.edges:
        if ce.is_branch:
            continue
        direct = DirectEdge(source=_ref(ce.edge.source), target=_ref(ce.edge.target))
        if direct.source == START:
            from_start.append(direct)
        elif direct.target == END:
            into_end.append(direct)
        else:
            other.append(direct)

    conditional: list[SpecEdge] = []
    parallel: list[SpecEdge] = []
    for g in classification.groups:
        targets = tuple(_ref(t) for t in g.targets)
        if g.execution_type is ExecutionType.PARALLEL:
            parallel.append(ParallelEdge(source=_ref(g.source), targets=targets))
        else:
            conditional.append(ConditionalEdge(source=_ref(g.source), condition=g.label, paths=targets))

    spec = WorkflowSpec(
        name=name,
        nodes=tuple(SpecNode(name=n) for n in spec_nodes),
        edges=tuple(from_start + into_end + other + conditional + parallel),
    )
    spec.validate()
    logger.debug(
        "Compiled spec '%s': %d nodes, %d edges (%d branch-groups)",
        name,
        len(spec.nodes),
        len(spec.edges),
        len(classification.groups),
    )
    return spec


def compile_graph(graph: Graph, *, name: str = DEFAULT_SPEC_NAME) -> WorkflowSpec:
    return compile_spec(graph.nodes, graph.edges, name=name)
