from __future__ import annotations

import pytest

from graphbuilder.graph import ExecutionType, NodeKind, graph_to_json, load_graph_json


pytestmark = pytest.mark.basic


def test_load_graph_json_reads_editor_export_shape() -> None:
    raw = {
        "nodes": [
            {"id": "source", "type": "source", "data": {"label": "source"}},
            {"id": "node-1", "type": "custom", "data": {"label": "Fetch Data"}},
            {"id": "end", "type": "end"},
        ],
        "edges": [
            {"id": "e1", "source": "source", "target": "node-1"},
            {"id": "e2", "source": "node-1", "target": "end", "animated": True, "label": "route"},
        ],
    }

    graph = load_graph_json(raw)

    assert [n.kind for n in graph.nodes] == [NodeKind.SOURCE, NodeKind.CUSTOM, NodeKind.END]
    assert graph.node("node-1").label == "Fetch Data"
    assert graph.node("end").label == "end"
    assert graph.edges[0].execution_type is None
    assert graph.edges[1].execution_type is ExecutionType.CONDITIONAL
    assert graph.edges[1].label == "route"


def test_load_graph_json_maps_animated_self_loop_to_cyclic() -> None:
    graph = load_graph_json({"nodes": [{"id": "a"}], "edges": [{"source": "a", "target": "a", "animated": True}]})
    assert graph.edges[0].execution_type is ExecutionType.CYCLIC
    assert graph.edges[0].id == "edge-1"


def test_load_graph_json_skips_malformed_and_duplicate_entries() -> None:
    raw = {
        "nodes": [{"id": "a"}, {"id": "a", "label": "dup"}, {"label": "no id"}, "junk"],
        "edges": [
            {"id": "x", "source": "a", "target": "a"},
            {"id": "x", "source": "a", "target": "b"},
            {"source": "a"},
            42,
        ],
    }
    graph = load_graph_json(raw)
    assert [n.id for n in graph.nodes] == ["a"]
    assert [(e.id, e.target) for e in graph.edges] == [("x", "a")]


def test_load_graph_json_accepts_explicit_type_and_group_fields() -> None:
    raw = {
        "nodes": [{"id": "a", "kind": "NodeKind.CUSTOM", "label": "A"}],
        "edges": [
            {"id": "e1", "source": "a", "target": "b", "executionType": "parallel", "groupIndex": 2},
            {"id": "e2", "source": "a", "target": "c", "execution_type": "bogus", "group": 0},
        ],
    }
    graph = load_graph_json(raw)
    assert graph.edges[0].execution_type is ExecutionType.PARALLEL
    assert graph.edges[0].group == 2
    assert graph.edges[1].execution_type is None
    assert graph.edges[1].group == 1


def test_load_graph_json_uses_model_dump_when_available() -> None:
    class _Model:
        def model_dump(self, mode: str = "python"):
            assert mode == "json"
            return {"nodes": [{"id": "n", "label": "N"}], "edges": []}

    graph = load_graph_json(_Model())
    assert graph.node("n").label == "N"


def test_load_graph_json_rejects_non_objects() -> None:
    with pytest.raises(TypeError):
        load_graph_json(["nodes"])


def test_graph_to_json_round_trips_through_loader() -> None:
    raw = {
        "nodes": [{"id": "source", "kind": "source"}, {"id": "n1", "label": "A"}, {"id": "end", "kind": "end"}],
        "edges": [
            {"id": "e1", "source": "source", "target": "n1"},
            {"id": "e2", "source": "n1", "target": "end", "execution_type": "conditional", "label": "go", "group": 3},
        ],
    }
    graph = load_graph_json(raw)
    assert load_graph_json(graph_to_json(graph)) == graph
