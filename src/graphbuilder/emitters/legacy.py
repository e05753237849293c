"""Single-file code generation straight from the editor graph.

This is the older export path: one source file per language with the node
stubs, decision stubs and the `StateGraph` wiring inline, instead of the
stub/implementation pair produced from a spec. Validation and edge ordering
are shared with the spec compiler, so both paths accept and reject the same
graphs.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..compiler.compiler import compile_spec
from ..compiler.spec import WorkflowSpec
from ..core.languages import Language
from ..graph.classifier import classify_edges
from ..graph.models import ExecutionType, GraphEdge, GraphNode, NodeKind
from ..logging import get_logger
from .base import DecisionFunction, node_ref

logger = get_logger(__name__)


def _apply_overrides(
    nodes: List[GraphNode],
    edges: List[GraphEdge],
    node_labels: Optional[Mapping[str, str]],
    edge_labels: Optional[Mapping[str, str]],
) -> tuple[List[GraphNode], List[GraphEdge]]:
    """Overrides are applied to copies; node labels by node id, edge labels by edge id or source node id."""
    node_labels = dict(node_labels or {})
    edge_labels = dict(edge_labels or {})

    out_nodes = [
        replace(n, label=node_labels[n.id]) if n.id in node_labels and n.kind is NodeKind.CUSTOM else n for n in nodes
    ]
    out_edges: List[GraphEdge] = []
    for e in edges:
        label = edge_labels.get(e.id, edge_labels.get(e.source))
        out_edges.append(replace(e, label=label) if label is not None else e)
    return out_nodes, out_edges


def _decision_functions(spec: WorkflowSpec, edges: List[GraphEdge]) -> List[DecisionFunction]:
    """Branch-groups with their classification labels, in spec order.

    Parallel groups keep their own labels here (the wire format drops them).
    """
    parallel_labels = [
        g.label for g in classify_edges(edges).groups if g.execution_type is ExecutionType.PARALLEL
    ]
    out = [DecisionFunction(name=e.condition, source=e.source, targets=tuple(e.paths)) for e in spec.conditional_edges]
    out.extend(
        DecisionFunction(name=label, source=e.source, targets=tuple(e.targets), parallel=True)
        for label, e in zip(parallel_labels, spec.parallel_edges)
    )
    return out


def _python_code(spec: WorkflowSpec, functions: List[DecisionFunction]) -> str:
    has_conditional = any(not f.parallel for f in functions)
    has_parallel = any(f.parallel for f in functions)

    typing_names = ["TypedDict"]
    if has_conditional:
        typing_names.append("Literal")
    if has_parallel:
        typing_names.append("Annotated")

    lines: List[str] = ["from langgraph.graph import StateGraph, START, END", f"from typing import {', '.join(typing_names)}"]
    if has_parallel:
        lines.append("import operator")
    if spec.node_names or functions:
        lines.append("from langchain_core.runnables.config import RunnableConfig")
    lines.extend(["", "", "class State(TypedDict):", '    """State class for the agent"""', "    # Add your state variables here"])
    if has_parallel:
        lines.extend(
            [
                "    # Parallel execution detected: use a reducer so branches can write to the same key",
                "    node_return: Annotated[list, operator.add]",
            ]
        )

    for name in spec.node_names:
        lines.extend(["", "", f"def {name}(state: State, config: RunnableConfig) -> State:", "    return {}"])

    for f in functions:
        lines.extend(["", ""])
        if f.parallel:
            lines.extend(
                [
                    f"def {f.name}(state: State, config: RunnableConfig) -> list[str]:",
                    f'    """Fan out from {f.source} to every branch of \'{f.name}\'"""',
                    f"    return [{', '.join(node_ref(t) for t in f.targets)}]",
                ]
            )
            continue
        literal = ", ".join(node_ref(t) for t in f.targets)
        lines.extend(
            [
                f"def {f.name}(state: State, config: RunnableConfig) -> Literal[{literal}]:",
                f'    """Function to handle conditional edge \'{f.name}\' from {f.source}"""',
            ]
        )
        lines.extend(f"    # return {node_ref(t)}" for t in f.targets)
        lines.append(f"    return {node_ref(f.targets[0])}")

    lines.extend(["", "", "workflow = StateGraph(State)", "", "# Add nodes to the graph"])
    lines.extend(f'workflow.add_node("{name}", {name})' for name in spec.node_names)
    lines.extend(["", "# Define edges"])
    lines.extend(f"workflow.add_edge({node_ref(e.source)}, {node_ref(e.target)})" for e in spec.direct_edges)
    lines.extend(f"workflow.add_conditional_edges({node_ref(f.source)}, {f.name})" for f in functions)
    lines.extend(["", "graph = workflow.compile()", ""])
    return "\n".join(lines)


def _typescript_code(spec: WorkflowSpec, functions: List[DecisionFunction]) -> str:
    has_parallel = any(f.parallel for f in functions)

    lines: List[str] = ['import { StateGraph, START, END, Annotation } from "@langchain/langgraph";']
    if has_parallel:
        lines.append('import { type BaseMessage } from "@langchain/core/messages";')
    lines.extend(["", "const StateAnnotation = Annotation.Root({", "  // Define your state properties here"])
    if has_parallel:
        lines.extend(
            [
                "  // Parallel execution detected: use a reducer so branches can write to the same key",
                "  messages: Annotation<BaseMessage[]>({",
                "    reducer: (x, y) => x.concat(y),",
                "    default: () => [],",
                "  }),",
            ]
        )
    lines.extend(["});", "", "type State = typeof StateAnnotation.State;"])

    for name in spec.node_names:
        lines.extend(["", f"function {name}(state: State): Partial<State> {{", "  return {};", "}"])

    for f in functions:
        lines.append("")
        if f.parallel:
            targets = ", ".join(node_ref(t) for t in f.targets)
            lines.extend([f"function {f.name}(state: State): string[] {{", f"  return [{targets}];", "}"])
            continue
        lines.append(f"function {f.name}(state: State): string {{")
        lines.extend(f"  // return {node_ref(t)};" for t in f.targets)
        lines.extend([f"  return {node_ref(f.targets[0])};", "}"])

    chain: List[str] = [f'  .addNode("{name}", {name})' for name in spec.node_names]
    chain.extend(f"  .addEdge({node_ref(e.source)}, {node_ref(e.target)})" for e in spec.direct_edges)
    chain.extend(f"  .addConditionalEdges({node_ref(f.source)}, {f.name})" for f in functions)
    lines.extend(["", "const workflow = new StateGraph(StateAnnotation)"])
    lines.extend(chain)
    lines[-1] += ";"
    lines.extend(["", "const graph = workflow.compile();", "export { graph };", ""])
    return "\n".join(lines)


_RENDERERS: Dict[Language, Callable[[WorkflowSpec, List[DecisionFunction]], str]] = {
    Language.PYTHON: _python_code,
    Language.TYPESCRIPT: _typescript_code,
}


def generate_langgraph_code(
    nodes: Iterable[GraphNode],
    edges: Iterable[GraphEdge],
    language: Union[Language, str] = Language.PYTHON,
    *,
    node_labels: Optional[Mapping[str, str]] = None,
    edge_labels: Optional[Mapping[str, str]] = None,
) -> str:
    """Return a complete single-file LangGraph program for the graph.

    Raises:
        InvalidGraph / AmbiguousLabel: same rules as `compile_spec`.
        ValueError: unsupported language.
    """
    lang = Language.parse(language)
    node_list, edge_list = _apply_overrides(list(nodes), list(edges), node_labels, edge_labels)

    spec = compile_spec(node_list, edge_list)
    functions = _decision_functions(spec, edge_list)
    code = _RENDERERS[lang](spec, functions)

    logger.debug("Generated single-file %s code (%d nodes, %d decision functions)", lang.value, len(spec.nodes), len(functions))
    return code

