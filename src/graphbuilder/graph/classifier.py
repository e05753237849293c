"""Edge classification (execution types + branch-groups).

Classification is a derived view: it is recomputed from the full edge list on
every call and depends only on each edge's `source`, `target`,
`execution_type`, `label` and `group` fields. Calling it twice on the same edge
list yields equal results.

Rules:
- A source with a single outgoing edge keeps a plain transition: `NORMAL`, or
  `CYCLIC` for a self-loop. An explicit branch type on that lone edge is kept
  (one-member branch-group).
- A source with several outgoing edges has *all* of them promoted into
  branch-groups keyed by `(source, kind, group)`; kind is `PARALLEL` when the
  edge says so and `CONDITIONAL` otherwise.
- A group is named by the non-default label of its siblings (whitespace runs
  become underscores); unnamed groups get `conditional_edge` /
  `parallel_execution`, numbered `_1`, `_2`, ... when the
  graph holds several unnamed groups of the same kind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import AmbiguousLabel
from .models import ExecutionType, GraphEdge

DEFAULT_CONDITIONAL_LABEL = "conditional_edge"
DEFAULT_PARALLEL_LABEL = "parallel_execution"

_DEFAULT_LABEL_RE = re.compile(r"^(conditional_edge|parallel_execution)(_\d+)?$")
_WS_RE = re.compile(r"\s+")

_BRANCH_TYPES = (ExecutionType.CONDITIONAL, ExecutionType.PARALLEL)

GroupKey = Tuple[str, ExecutionType, int]


@dataclass(frozen=True)
class BranchGroup:
    source: str
    execution_type: ExecutionType
    index: int
    label: str
    edges: Tuple[GraphEdge, ...]

    @property
    def key(self) -> GroupKey:
        return (self.source, self.execution_type, self.index)

    @property
    def targets(self) -> List[str]:
        return [e.target for e in self.edges]


@dataclass(frozen=True)
class ClassifiedEdge:
    edge: GraphEdge
    execution_type: ExecutionType
    group_label: Optional[str] = None
    group_key: Optional[GroupKey] = None

    @property
    def is_branch(self) -> bool:
        return self.execution_type in _BRANCH_TYPES


@dataclass(frozen=True)
class Classification:
    edges: List[ClassifiedEdge]
    groups: List[BranchGroup]

    def for_edge(self, edge_id: str) -> Optional[ClassifiedEdge]:
        for ce in self.edges:
            if ce.edge.id == edge_id:
                return ce
        return None

    @property
    def has_conditional(self) -> bool:
        return any(g.execution_type is ExecutionType.CONDITIONAL for g in self.groups)

    @property
    def has_parallel(self) -> bool:
        return any(g.execution_type is ExecutionType.PARALLEL for g in self.groups)


def is_default_label(label: Optional[str]) -> bool:
    s = str(label or "").strip()
    return not s or bool(_DEFAULT_LABEL_RE.match(s))


def _group_label(key: GroupKey, members: List[GraphEdge]) -> Optional[str]:
    named: list[str] = []
    for e in members:
        s = _WS_RE.sub("_", str(e.label or "").strip())
        if is_default_label(s) or s in named:
            continue
        named.append(s)
    if len(named) > 1:
        raise AmbiguousLabel(
            named[0],
            f"Branch-group {key[1].value} #{key[2]} from '{key[0]}' has conflicting labels: {named}",
        )
    return named[0] if named else None


def classify_edges(edges: Iterable[GraphEdge]) -> Classification:
    """Tag every edge with its execution type and branch-group label."""
    edge_list = list(edges)

    out_degree: Dict[str, int] = {}
    for e in edge_list:
        out_degree[e.source] = out_degree.get(e.source, 0) + 1

    kinds: Dict[str, ExecutionType] = {}
    members: Dict[GroupKey, List[GraphEdge]] = {}
    for e in edge_list:
        et = e.execution_type
        if out_degree[e.source] == 1 and et not in _BRANCH_TYPES:
            kinds[e.id] = ExecutionType.CYCLIC if e.is_self_loop else ExecutionType.NORMAL
            continue
        kind = ExecutionType.PARALLEL if et is ExecutionType.PARALLEL else ExecutionType.CONDITIONAL
        kinds[e.id] = kind
        members.setdefault((e.source, kind, e.group), []).append(e)

    labels: Dict[GroupKey, Optional[str]] = {key: _group_label(key, m) for key, m in members.items()}

    for kind, base in (
        (ExecutionType.CONDITIONAL, DEFAULT_CONDITIONAL_LABEL),
        (ExecutionType.PARALLEL, DEFAULT_PARALLEL_LABEL),
    ):
        unnamed = [key for key in members if key[1] is kind and labels[key] is None]
        if len(unnamed) == 1:
            labels[unnamed[0]] = base
        else:
            for i, key in enumerate(unnamed, start=1):
                labels[key] = f"{base}_{i}"

    owner: Dict[str, GroupKey] = {}
    for key in members:
        label = str(labels[key])
        prev = owner.get(label)
        if prev is not None:
            raise AmbiguousLabel(
                label,
                f"Label '{label}' names two branch-groups (from '{prev[0]}' and '{key[0]}')",
            )
        owner[label] = key

    groups = [
        BranchGroup(source=key[0], execution_type=key[1], index=key[2], label=str(labels[key]), edges=tuple(m))
        for key, m in members.items()
    ]

    classified: list[ClassifiedEdge] = []
    for e in edge_list:
        kind = kinds[e.id]
        if kind in _BRANCH_TYPES:
            key = (e.source, kind, e.group)
            classified.append(ClassifiedEdge(edge=e, execution_type=kind, group_label=labels[key], group_key=key))
        else:
            classified.append(ClassifiedEdge(edge=e, execution_type=kind))

    return Classification(edges=classified, groups=groups)
