from __future__ import annotations

import pytest

from graphbuilder.compiler import ConditionalEdge, compile_graph
from graphbuilder.errors import InvalidGraph
from graphbuilder.graph import ExecutionType, GraphSession, NodeKind


pytestmark = pytest.mark.basic


def test_session_starts_with_sentinels_and_allocates_ids() -> None:
    s = GraphSession()
    a = s.add_node()
    b = s.add_node("Summarize")

    snap = s.snapshot()
    assert [n.kind for n in snap.nodes] == [NodeKind.SOURCE, NodeKind.END, NodeKind.CUSTOM, NodeKind.CUSTOM]
    assert (a.id, a.label) == ("node-1", "Node 1")
    assert (b.id, b.label) == ("node-2", "Summarize")


def test_ids_are_not_reused_after_removal() -> None:
    s = GraphSession()
    a = s.add_node()
    s.remove_node(a.id)
    assert s.add_node().id == "node-2"

    e1 = s.connect(s.source_id, "node-2")
    s.remove_edge(e1.id)
    assert s.connect(s.source_id, "node-2").id == "edge-2"


def test_removing_a_node_drops_incident_edges() -> None:
    s = GraphSession()
    a = s.add_node("A")
    s.connect(s.source_id, a.id)
    s.connect(a.id, s.end_id)

    s.remove_node(a.id)
    assert s.snapshot().edges == []


def test_sentinels_are_protected() -> None:
    s = GraphSession()
    with pytest.raises(InvalidGraph):
        s.remove_node(s.source_id)
    with pytest.raises(InvalidGraph):
        s.rename_node(s.end_id, "finish")


def test_connect_rejects_unknown_nodes() -> None:
    s = GraphSession()
    with pytest.raises(InvalidGraph):
        s.connect(s.source_id, "nope")


def test_self_loop_defaults_to_cyclic() -> None:
    s = GraphSession()
    a = s.add_node("A")
    assert s.connect(a.id, a.id).execution_type is ExecutionType.CYCLIC


def test_choosing_branch_type_retypes_siblings() -> None:
    s = GraphSession()
    a, b, c = s.add_node("A"), s.add_node("B"), s.add_node("C")
    s.connect(a.id, b.id)
    s.connect(a.id, c.id, execution_type=ExecutionType.PARALLEL)

    types = {e.target: e.execution_type for e in s.snapshot().edges}
    assert types == {b.id: ExecutionType.PARALLEL, c.id: ExecutionType.PARALLEL}

    first = s.snapshot().edges[0]
    s.set_execution_type(first.id, ExecutionType.CONDITIONAL)
    assert {e.execution_type for e in s.snapshot().edges} == {ExecutionType.CONDITIONAL}


def test_relabel_group_names_every_sibling() -> None:
    s = GraphSession()
    a, b, c = s.add_node("A"), s.add_node("B"), s.add_node("C")
    s.connect(s.source_id, a.id)
    s.connect(a.id, b.id, execution_type=ExecutionType.CONDITIONAL)
    s.connect(a.id, c.id, execution_type=ExecutionType.CONDITIONAL)
    s.connect(b.id, s.end_id)
    s.connect(c.id, s.end_id)

    relabeled = s.relabel_group(a.id, "should continue")
    assert [e.label for e in relabeled] == ["should continue", "should continue"]

    with pytest.raises(InvalidGraph):
        s.relabel_group(a.id, "x", group=2)


def test_snapshot_is_detached_from_later_edits() -> None:
    s = GraphSession()
    a = s.add_node("A")
    s.connect(s.source_id, a.id)
    s.connect(a.id, s.end_id)
    before = s.snapshot()

    s.rename_node(a.id, "Renamed")
    assert before.node(a.id).label == "A"
    assert s.snapshot().node(a.id).label == "Renamed"


def test_rename_updates_every_reference_after_recompile() -> None:
    s = GraphSession()
    a, b, c = s.add_node("A"), s.add_node("B"), s.add_node("C")
    s.connect(s.source_id, a.id)
    s.connect(a.id, b.id, execution_type=ExecutionType.CONDITIONAL, label="route")
    s.connect(a.id, c.id, execution_type=ExecutionType.CONDITIONAL)
    s.connect(b.id, a.id)
    s.connect(c.id, s.end_id)

    s.rename_node(a.id, "Planner")
    spec = compile_graph(s.snapshot())

    assert spec.node_names == ["Planner", "B", "C"]
    refs = []
    for e in spec.edges:
        refs.append(e.source)
        refs.extend(getattr(e, "paths", ()) or (getattr(e, "target", None),))
    assert "A" not in refs
    cond = [e for e in spec.edges if isinstance(e, ConditionalEdge)]
    assert cond == [ConditionalEdge(source="Planner", condition="route", paths=("B", "C"))]
