from __future__ import annotations

import pytest
import yaml

from graphbuilder.compiler import (
    ConditionalEdge,
    DirectEdge,
    ParallelEdge,
    SpecNode,
    WorkflowSpec,
    compile_to_text,
    parse_spec_text,
    render_spec_text,
    spec_header,
)
from graphbuilder.errors import InvalidSpec
from graphbuilder.graph import load_graph_json


pytestmark = pytest.mark.basic


def _spec() -> WorkflowSpec:
    return WorkflowSpec(
        name="CustomAgent",
        nodes=(SpecNode("A"), SpecNode("B"), SpecNode("C")),
        edges=(
            DirectEdge("__start__", "A"),
            DirectEdge("B", "__end__"),
            DirectEdge("C", "__end__"),
            ConditionalEdge("A", "route", ("B", "C")),
            ParallelEdge("B", ("C", "__end__")),
        ),
    )


def test_render_spec_text_layout() -> None:
    text = render_spec_text(_spec(), "python")

    assert text.startswith(spec_header("python") + "\n\n")
    body = text[len(spec_header("python")) + 2 :]
    assert body == (
        "name: CustomAgent\n"
        "nodes:\n"
        "  - name: A\n"
        "  - name: B\n"
        "  - name: C\n"
        "edges:\n"
        "  - from: __start__\n"
        "    to: A\n"
        "  - from: B\n"
        "    to: __end__\n"
        "  - from: C\n"
        "    to: __end__\n"
        "  - from: A\n"
        "    condition: route\n"
        "    paths: [B, C]\n"
        "  - from: B\n"
        "    parallel: [C, __end__]\n"
    )


def test_header_names_language_specific_artifacts() -> None:
    assert "`stub.py`" in spec_header("python")
    assert "`implementation.ts`" in spec_header("typescript")
    assert all(line.startswith("#") for line in spec_header("ts").splitlines())


def test_rendered_text_is_plain_yaml() -> None:
    raw = yaml.safe_load(render_spec_text(_spec()))
    assert raw == _spec().to_dict()


def test_parse_inverts_render() -> None:
    assert parse_spec_text(render_spec_text(_spec(), "typescript")) == _spec()


def test_yaml_keywords_are_quoted() -> None:
    spec = WorkflowSpec(name="Agent", nodes=(SpecNode("yes"),), edges=(DirectEdge("__start__", "yes"), DirectEdge("yes", "__end__")))
    text = render_spec_text(spec)
    assert '  - name: "yes"' in text
    assert parse_spec_text(text).node_names == ["yes"]


def test_parse_accepts_mapping_style_paths() -> None:
    text = """
name: Agent
nodes:
  - name: check
  - name: work
edges:
  - from: __start__
    to: check
  - from: check
    condition: should_continue
    paths:
      continue: work
      stop: __end__
  - from: work
    to: check
"""
    spec = parse_spec_text(text)
    assert spec.conditional_edges == [ConditionalEdge("check", "should_continue", ("work", "__end__"))]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "name: [unclosed",
        "- just\n- a list\n",
        "name: A\nnodes:\n  - name: x\nedges:\n  - from: x\n    to: y\n",
        "name: A\nnodes:\n  - name: x\n  - name: x\nedges: []\n",
        "name: A\nnodes:\n  - name: x\nedges:\n  - from: x\n    condition: c\n    paths: []\n",
        "nodes: []\nedges: []\n",
    ],
)
def test_parse_rejects_invalid_spec_text(text: str) -> None:
    with pytest.raises(InvalidSpec):
        parse_spec_text(text)


def test_compile_to_text_from_editor_graph() -> None:
    graph = load_graph_json(
        {
            "nodes": [
                {"id": "source", "type": "source"},
                {"id": "n1", "data": {"label": "A"}},
                {"id": "end", "type": "end"},
            ],
            "edges": [{"source": "source", "target": "n1"}, {"source": "n1", "target": "end"}],
        }
    )
    text = compile_to_text(graph, "python", name="MyAgent")

    assert "name: MyAgent\n" in text
    assert text.endswith("  - from: A\n    to: __end__\n")
    assert compile_to_text(graph, "python", name="MyAgent") == text


_LINEAR = "nodes:\n  - name: {node}\nedges:\n  - from: __start__\n    to: {node}\n  - from: {node}\n    to: __end__\n"


@pytest.mark.parametrize(
    ("name", "node"),
    [
        ("My Agent", "work"),
        ("class", "work"),
        ("Agent", "a-b"),
        ("Agent", "return"),
        ("Agent", "workflow"),
        ("Agent", "Agent"),
    ],
)
def test_parse_rejects_names_unusable_in_code(name: str, node: str) -> None:
    with pytest.raises(InvalidSpec):
        parse_spec_text(f'name: "{name}"\n' + _LINEAR.format(node=f'"{node}"'))


@pytest.mark.parametrize("condition", ["a-b", "lambda", "graph"])
def test_parse_rejects_condition_names_unusable_in_code(condition: str) -> None:
    text = (
        "name: Agent\n"
        "nodes:\n  - name: work\n"
        "edges:\n"
        "  - from: __start__\n    to: work\n"
        f'  - from: work\n    condition: "{condition}"\n    paths: [work, __end__]\n'
    )
    with pytest.raises(InvalidSpec):
        parse_spec_text(text)


@pytest.mark.parametrize(
    "text",
    [
        "name: Agent\nnodes: []\nedges: []\n",
        "name: Agent\nnodes:\n  - name: work\nedges:\n  - from: work\n    to: __end__\n",
        "name: Agent\nnodes:\n  - name: work\nedges:\n  - from: __start__\n    to: work\n",
    ],
)
def test_parse_requires_entry_and_exit_edges(text: str) -> None:
    with pytest.raises(InvalidSpec):
        parse_spec_text(text)
