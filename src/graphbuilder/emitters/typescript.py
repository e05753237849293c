"""TypeScript (LangGraph.js) stub/implementation templates."""

from __future__ import annotations

from typing import List

from ..compiler.spec import END, WorkflowSpec
from .base import decision_functions, node_ref


def _array_expr(targets) -> str:
    return "[" + ", ".join(node_ref(t) for t in targets) + "]"


def render_stub(spec: WorkflowSpec) -> str:
    functions = decision_functions(spec)

    lines: List[str] = [
        f"/* Stub for the {spec.name} graph. This file is generated; do not edit it. */",
        'import { StateGraph, START, END, type AnnotationRoot } from "@langchain/langgraph";',
        "",
        "// eslint-disable-next-line @typescript-eslint/no-explicit-any",
        "type NodeFn = (state: any) => any;",
        "// eslint-disable-next-line @typescript-eslint/no-explicit-any",
        "type RouterFn = (state: any) => string;",
        "// eslint-disable-next-line @typescript-eslint/no-explicit-any",
        "type FanOutFn = (state: any) => string[];",
        "",
        "export type Implementation = {",
    ]
    lines.extend(f"  {name}: NodeFn;" for name in spec.node_names)
    lines.extend(f"  {f.name}: {'FanOutFn' if f.parallel else 'RouterFn'};" for f in functions)
    lines.extend(
        [
            "};",
            "",
            "// eslint-disable-next-line @typescript-eslint/no-explicit-any",
            f"export function {spec.name}<S extends AnnotationRoot<any>>(stateAnnotation: S, impl: Implementation) {{",
            "  return new StateGraph(stateAnnotation)",
        ]
    )
    chain: List[str] = [f'    .addNode("{name}", impl.{name})' for name in spec.node_names]
    chain.extend(f"    .addEdge({node_ref(e.source)}, {node_ref(e.target)})" for e in spec.direct_edges)
    chain.extend(
        f"    .addConditionalEdges({node_ref(f.source)}, impl.{f.name}, {_array_expr(f.targets)})" for f in functions
    )
    lines.extend(chain)
    lines[-1] += ";"
    lines.extend(["}", ""])
    return "\n".join(lines)


def render_implementation(spec: WorkflowSpec) -> str:
    functions = decision_functions(spec)
    uses_end = any(END in f.targets for f in functions)
    imports = "Annotation, END" if uses_end else "Annotation"

    lines: List[str] = [
        f"/* Placeholder implementation for the {spec.name} stub in `stub.ts`. Edit freely. */",
        f'import {{ {imports} }} from "@langchain/langgraph";',
        f'import {{ {spec.name} }} from "./stub";',
        "",
        "const StateAnnotation = Annotation.Root({",
        "  // Define your state properties here",
        "});",
        "",
        "type State = typeof StateAnnotation.State;",
    ]
    for name in spec.node_names:
        lines.extend(
            [
                "",
                f"function {name}(state: State): Partial<State> {{",
                f'  console.log("In node: {name}");',
                "  return {};",
                "}",
            ]
        )
    for f in functions:
        lines.append("")
        if f.parallel:
            lines.extend(
                [
                    f"function {f.name}(state: State): string[] {{",
                    f'  console.log("In parallel fan-out: {f.name}");',
                    "  // Every branch runs concurrently; return a subset to skip some.",
                    f"  return {_array_expr(f.targets)};",
                    "}",
                ]
            )
            continue
        lines.extend([f"function {f.name}(state: State): string {{", f'  console.log("In condition: {f.name}");'])
        lines.extend(f"  // return {node_ref(t)};" for t in f.targets)
        lines.extend([f"  return {node_ref(f.targets[0])};", "}"])

    impl_names = ", ".join(spec.node_names + [f.name for f in functions])
    lines.extend(
        [
            "",
            f"export const agent = {spec.name}(StateAnnotation, {{ {impl_names} }});",
            "export const graph = agent.compile();",
            "",
        ]
    )
    return "\n".join(lines)
