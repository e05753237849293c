"""Python (LangGraph) stub/implementation templates."""

from __future__ import annotations

from typing import List

from ..compiler.spec import END, WorkflowSpec
from .base import DecisionFunction, decision_functions, node_ref


def _list_expr(targets) -> str:
    return "[" + ", ".join(node_ref(t) for t in targets) + "]"


def render_stub(spec: WorkflowSpec) -> str:
    functions = decision_functions(spec)
    expected = spec.node_names + [f.name for f in functions]

    lines: List[str] = [
        f'"""Stub for the {spec.name} graph. This file is generated; do not edit it.',
        "",
        "Pass node and decision implementations through `impl` (see `implementation.py`).",
        '"""',
        "",
        "from typing import Any, Callable, Optional, Type",
        "",
        "from langgraph.graph import END, START, StateGraph",
        "",
        "",
        f"def {spec.name}(",
        "    *,",
        "    state_schema: Optional[Type[Any]] = None,",
        "    config_schema: Optional[Type[Any]] = None,",
        "    impl: list[tuple[str, Callable]],",
        ") -> StateGraph:",
        f'    """Create the state graph for {spec.name}."""',
        "    builder = StateGraph(state_schema, config_schema=config_schema)",
        "",
        "    nodes_by_name = {name: imp for name, imp in impl}",
        "    all_names = set(nodes_by_name)",
        "",
        "    expected_implementations = {",
    ]
    lines.extend(f'        "{name}",' for name in expected)
    lines.extend(
        [
            "    }",
            "",
            "    missing = expected_implementations - all_names",
            "    if missing:",
            '        raise ValueError(f"Missing implementations for: {missing}")',
            "",
            "    extra = all_names - expected_implementations",
            "    if extra:",
            '        raise ValueError(f"Extra implementations for: {extra}. Please regenerate the stub.")',
            "",
            "    # Add nodes",
        ]
    )
    lines.extend(f'    builder.add_node("{name}", nodes_by_name["{name}"])' for name in spec.node_names)
    lines.extend(["", "    # Add edges"])
    for e in spec.direct_edges:
        lines.append(f"    builder.add_edge({node_ref(e.source)}, {node_ref(e.target)})")
    for f in functions:
        lines.extend(
            [
                "    builder.add_conditional_edges(",
                f"        {node_ref(f.source)},",
                f'        nodes_by_name["{f.name}"],',
                f"        {_list_expr(f.targets)},",
                "    )",
            ]
        )
    lines.extend(["    return builder", ""])
    return "\n".join(lines)


def _decision_body(f: DecisionFunction) -> List[str]:
    if f.parallel:
        return [
            "    # Every branch runs concurrently; return a subset to skip some.",
            f"    return {_list_expr(f.targets)}",
        ]
    body = [f"    # return {node_ref(t)}" for t in f.targets]
    body.append(f"    return {node_ref(f.targets[0])}")
    return body


def render_implementation(spec: WorkflowSpec) -> str:
    functions = decision_functions(spec)
    uses_end = any(END in f.targets for f in functions)

    lines: List[str] = [
        f'"""Placeholder implementation for the {spec.name} stub in `stub.py`. Edit freely."""',
        "",
        "from typing_extensions import TypedDict",
        "",
    ]
    if uses_end:
        lines.extend(["from langgraph.graph import END", ""])
    lines.extend(
        [
            f"from stub import {spec.name}",
            "",
            "",
            "class SomeState(TypedDict):",
            "    # define state attributes here",
            "    pass",
            "",
        ]
    )
    for name in spec.node_names:
        lines.extend(
            [
                "",
                f"def {name}(state: SomeState) -> dict:",
                f'    print("In node: {name}")',
                "    return {",
                "        # Add your state update logic here",
                "    }",
                "",
            ]
        )
    for f in functions:
        kind = "parallel fan-out" if f.parallel else "condition"
        returns = "list[str]" if f.parallel else "str"
        lines.extend(["", f"def {f.name}(state: SomeState) -> {returns}:", f'    print("In {kind}: {f.name}")'])
        lines.extend(_decision_body(f))
        lines.append("")

    lines.extend(["", f"agent = {spec.name}(", "    state_schema=SomeState,", "    impl=["])
    lines.extend(f'        ("{name}", {name}),' for name in spec.node_names + [f.name for f in functions])
    lines.extend(["    ],", ")", "", "compiled_agent = agent.compile()", ""])
    return "\n".join(lines)
