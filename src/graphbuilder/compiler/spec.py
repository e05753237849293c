"""Canonical workflow spec (intermediate representation).

The spec is a value: it is rebuilt from a graph snapshot on every compile and
carries no mutable state. Edge records come in three shapes mirroring the wire
format:

  {from, to}                          DirectEdge
  {from, condition, paths: [...]}     ConditionalEdge
  {from, parallel: [...]}             ParallelEdge
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from ..core.names import identifier_problem
from ..errors import InvalidSpec

START = "__start__"
END = "__end__"
SENTINELS = (START, END)


@dataclass(frozen=True)
class SpecNode:
    name: str


@dataclass(frozen=True)
class DirectEdge:
    source: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.source, "to": self.target}


@dataclass(frozen=True)
class ConditionalEdge:
    source: str
    condition: str
    paths: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.source, "condition": self.condition, "paths": list(self.paths)}


@dataclass(frozen=True)
class ParallelEdge:
    source: str
    targets: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.source, "parallel": list(self.targets)}


SpecEdge = Union[DirectEdge, ConditionalEdge, ParallelEdge]


@dataclass(frozen=True)
class WorkflowSpec:
    name: str
    nodes: Tuple[SpecNode, ...] = field(default_factory=tuple)
    edges: Tuple[SpecEdge, ...] = field(default_factory=tuple)

    @property
    def node_names(self) -> List[str]:
        return [n.name for n in self.nodes]

    @property
    def direct_edges(self) -> List[DirectEdge]:
        return [e for e in self.edges if isinstance(e, DirectEdge)]

    @property
    def conditional_edges(self) -> List[ConditionalEdge]:
        return [e for e in self.edges if isinstance(e, ConditionalEdge)]

    @property
    def parallel_edges(self) -> List[ParallelEdge]:
        return [e for e in self.edges if isinstance(e, ParallelEdge)]

    def validate(self) -> None:
        """Check names and references.

        Every name is written into generated code as a function name, so the
        spec name, node names and condition names must be usable identifiers
        and distinct from one another. The spec needs an entry edge from
        `__start__` and at least one route into `__end__`.
        """
        problem = identifier_problem(self.name)
        if problem is not None:
            raise InvalidSpec(f"spec name '{self.name}' {problem}")

        names: set[str] = set()
        for n in self.nodes:
            if n.name in SENTINELS:
                raise InvalidSpec(f"Invalid node name '{n.name}'")
            problem = identifier_problem(n.name)
            if problem is not None:
                raise InvalidSpec(f"Node name '{n.name}' {problem}")
            if n.name in names or n.name == self.name:
                raise InvalidSpec(f"Duplicate node name '{n.name}'")
            names.add(n.name)

        def _check_source(ref: str) -> None:
            if ref != START and ref not in names:
                raise InvalidSpec(f"Edge source '{ref}' is not a declared node")

        def _check_target(ref: str) -> None:
            if ref != END and ref not in names:
                raise InvalidSpec(f"Edge target '{ref}' is not a declared node")

        conditions: set[str] = set()
        targets: set[str] = set()
        for e in self.edges:
            _check_source(e.source)
            if isinstance(e, DirectEdge):
                _check_target(e.target)
                targets.add(e.target)
            elif isinstance(e, ConditionalEdge):
                problem = identifier_problem(e.condition)
                if problem is not None:
                    raise InvalidSpec(f"Condition '{e.condition}' {problem}")
                if e.condition in names or e.condition in conditions or e.condition == self.name:
                    raise InvalidSpec(f"Duplicate condition '{e.condition}'")
                conditions.add(e.condition)
                if not e.paths:
                    raise InvalidSpec(f"Condition '{e.condition}' has no paths")
                for p in e.paths:
                    _check_target(p)
                targets.update(e.paths)
            else:
                if not e.targets:
                    raise InvalidSpec(f"Parallel edge from '{e.source}' has no targets")
                for t in e.targets:
                    _check_target(t)
                targets.update(e.targets)

        if not any(e.source == START for e in self.edges):
            raise InvalidSpec(f"spec has no edge from {START}")
        if END not in targets:
            raise InvalidSpec(f"spec has no edge into {END}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "nodes": [{"name": n.name} for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def _str_list(value: Any, *, what: str) -> Tuple[str, ...]:
    if isinstance(value, dict):
        # Older generator specs map path keys to targets: {continue: process, end: end}.
        value = list(value.values())
    if not isinstance(value, list):
        raise InvalidSpec(f"{what} must be a list")
    out: list[str] = []
    for v in value:
        if not isinstance(v, str) or not v.strip():
            raise InvalidSpec(f"{what} entries must be non-empty strings")
        out.append(v.strip())
    return tuple(out)


def spec_from_dict(raw: Any) -> WorkflowSpec:
    """Build and validate a `WorkflowSpec` from its dict form."""
    if not isinstance(raw, dict):
        raise InvalidSpec("spec must be a mapping")

    name = str(raw.get("name") or "").strip()

    nodes: list[SpecNode] = []
    nodes_raw = raw.get("nodes") or []
    if not isinstance(nodes_raw, list):
        raise InvalidSpec("spec.nodes must be a list")
    for n in nodes_raw:
        nm = n.get("name") if isinstance(n, dict) else n
        if not isinstance(nm, str) or not nm.strip():
            raise InvalidSpec("spec.nodes entries need a non-empty name")
        nodes.append(SpecNode(name=nm.strip()))

    edges: list[SpecEdge] = []
    edges_raw = raw.get("edges") or []
    if not isinstance(edges_raw, list):
        raise InvalidSpec("spec.edges must be a list")
    for i, e in enumerate(edges_raw):
        if not isinstance(e, dict):
            raise InvalidSpec(f"spec.edges[{i}] must be a mapping")
        src = e.get("from")
        if not isinstance(src, str) or not src.strip():
            raise InvalidSpec(f"spec.edges[{i}] is missing 'from'")
        src = src.strip()
        if "condition" in e:
            cond = e.get("condition")
            if not isinstance(cond, str) or not cond.strip():
                raise InvalidSpec(f"spec.edges[{i}].condition must be a non-empty string")
            edges.append(
                ConditionalEdge(source=src, condition=cond.strip(), paths=_str_list(e.get("paths"), what=f"spec.edges[{i}].paths"))
            )
        elif "parallel" in e:
            edges.append(ParallelEdge(source=src, targets=_str_list(e.get("parallel"), what=f"spec.edges[{i}].parallel")))
        else:
            tgt = e.get("to")
            if not isinstance(tgt, str) or not tgt.strip():
                raise InvalidSpec(f"spec.edges[{i}] is missing 'to'")
            edges.append(DirectEdge(source=src, target=tgt.strip()))

    spec = WorkflowSpec(name=name, nodes=tuple(nodes), edges=tuple(edges))
    spec.validate()
    return spec
