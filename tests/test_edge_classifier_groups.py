from __future__ import annotations

import pytest

from graphbuilder.errors import AmbiguousLabel
from graphbuilder.graph import ExecutionType, GraphEdge, classify_edges, is_default_label


pytestmark = pytest.mark.basic


C = ExecutionType.CONDITIONAL
P = ExecutionType.PARALLEL


def _e(eid: str, src: str, tgt: str, et=None, label: str = "", group: int = 1) -> GraphEdge:
    return GraphEdge(id=eid, source=src, target=tgt, execution_type=et, label=label, group=group)


def test_single_outgoing_edges_stay_plain_transitions() -> None:
    result = classify_edges([_e("e1", "s", "a"), _e("e2", "a", "a"), _e("e3", "b", "end")])

    assert [ce.execution_type for ce in result.edges] == [
        ExecutionType.NORMAL,
        ExecutionType.CYCLIC,
        ExecutionType.NORMAL,
    ]
    assert result.groups == []
    assert not result.has_conditional and not result.has_parallel


def test_siblings_without_type_become_one_conditional_group() -> None:
    result = classify_edges([_e("e1", "a", "b"), _e("e2", "a", "c")])

    assert len(result.groups) == 1
    g = result.groups[0]
    assert g.execution_type is C
    assert g.label == "conditional_edge"
    assert g.targets == ["b", "c"]
    assert {ce.group_label for ce in result.edges} == {"conditional_edge"}


def test_third_sibling_joins_existing_group_on_reclassification() -> None:
    edges = [_e("e1", "a", "b"), _e("e2", "a", "c")]
    first = classify_edges(edges)
    second = classify_edges(edges + [_e("e3", "a", "d")])

    assert first.groups[0].targets == ["b", "c"]
    assert len(second.groups) == 1
    assert second.groups[0].targets == ["b", "c", "d"]


def test_parallel_siblings_form_parallel_group() -> None:
    result = classify_edges([_e("e1", "a", "b", P), _e("e2", "a", "c", P)])

    assert [g.execution_type for g in result.groups] == [P]
    assert result.groups[0].label == "parallel_execution"
    assert result.has_parallel


def test_lone_edge_keeps_explicit_branch_type() -> None:
    result = classify_edges([_e("e1", "a", "b", C, label="check")])

    assert result.edges[0].execution_type is C
    assert result.groups[0].label == "check"
    assert result.groups[0].targets == ["b"]


def test_user_label_on_one_sibling_names_the_group() -> None:
    result = classify_edges([_e("e1", "a", "b", C, label="route"), _e("e2", "a", "c", C)])

    assert result.groups[0].label == "route"
    assert result.for_edge("e2").group_label == "route"


def test_conflicting_labels_inside_one_group_are_rejected() -> None:
    with pytest.raises(AmbiguousLabel) as exc:
        classify_edges([_e("e1", "a", "b", C, label="left"), _e("e2", "a", "c", C, label="right")])
    assert exc.value.label == "left"


def test_independent_groups_on_one_source_get_numbered_labels() -> None:
    edges = [
        _e("e1", "a", "b", C, group=1),
        _e("e2", "a", "c", C, group=1),
        _e("e3", "a", "d", C, group=2),
        _e("e4", "a", "e", C, group=2),
    ]
    result = classify_edges(edges)

    assert [(g.label, g.targets) for g in result.groups] == [
        ("conditional_edge_1", ["b", "c"]),
        ("conditional_edge_2", ["d", "e"]),
    ]


def test_same_label_on_two_groups_is_ambiguous() -> None:
    edges = [
        _e("e1", "a", "b", C, label="route"),
        _e("e2", "a", "c", C),
        _e("e3", "x", "y", C, label="route"),
        _e("e4", "x", "z", C),
    ]
    with pytest.raises(AmbiguousLabel) as exc:
        classify_edges(edges)
    assert exc.value.label == "route"


def test_default_looking_labels_are_renumbered() -> None:
    edges = [
        _e("e1", "a", "b", C, label="conditional_edge_7"),
        _e("e2", "a", "c", C),
    ]
    assert classify_edges(edges).groups[0].label == "conditional_edge"


def test_classification_is_idempotent() -> None:
    edges = [_e("e1", "s", "a"), _e("e2", "a", "b", P), _e("e3", "a", "c", P), _e("e4", "b", "b")]
    assert classify_edges(edges) == classify_edges(list(edges))


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("", True),
        ("conditional_edge", True),
        ("conditional_edge_12", True),
        ("parallel_execution_2", True),
        ("route", False),
        ("conditional_edgeX", False),
    ],
)
def test_is_default_label(label: str, expected: bool) -> None:
    assert is_default_label(label) is expected


def test_self_loop_with_siblings_joins_conditional_group() -> None:
    result = classify_edges([_e("e1", "a", "a", ExecutionType.CYCLIC), _e("e2", "a", "end")])

    assert [ce.execution_type for ce in result.edges] == [C, C]
    assert result.groups[0].targets == ["a", "end"]
