"""Canonical spec text (the wire contract with code generation backends).

Rendering is hand-written rather than delegated to a YAML dumper so the output
is byte-stable: fixed header, fixed key order, two-space indentation, flow-style
target lists. Parsing goes through PyYAML's `safe_load`.
"""

from __future__ import annotations

from typing import Any, List, Union

import yaml

from ..core.config import DEFAULT_SPEC_NAME
from ..core.languages import Language
from ..errors import InvalidSpec
from ..graph.models import Graph
from .compiler import compile_graph
from .spec import ConditionalEdge, DirectEdge, WorkflowSpec, spec_from_dict

SPEC_FILENAME = "spec.yml"

# YAML 1.1 resolves these plain scalars to booleans/null.
_YAML_SPECIAL = {"y", "n", "yes", "no", "true", "false", "on", "off", "null"}


def stub_filename(language: Union[Language, str]) -> str:
    return f"stub.{Language.parse(language).extension}"


def implementation_filename(language: Union[Language, str]) -> str:
    return f"implementation.{Language.parse(language).extension}"


def spec_header(language: Union[Language, str] = Language.PYTHON) -> str:
    lang = Language.parse(language)
    return "\n".join(
        [
            "# This YAML was auto-generated based on an architecture",
            "# designed in LangGraph Builder.",
            "#",
            "# The YAML was used by langgraph-gen (https://github.com/langchain-ai/langgraph-gen-py)",
            "# to generate a code stub for a LangGraph application that follows the architecture.",
            "#",
            "# langgraph-gen is an open source CLI tool that converts YAML specifications into LangGraph code stubs.",
            "#",
            f"# The code stub generated from this spec can be found in `{stub_filename(lang)}`.",
            "#",
            f"# A placeholder implementation for the generated stub can be found in `{implementation_filename(lang)}`.",
        ]
    )


def _scalar(value: str) -> str:
    if value.lower() in _YAML_SPECIAL:
        return f'"{value}"'
    return value


def _flow_list(values: Any) -> str:
    return "[" + ", ".join(_scalar(v) for v in values) + "]"


def render_spec_text(spec: WorkflowSpec, language: Union[Language, str] = Language.PYTHON) -> str:
    """Render the spec wire text (header comment + YAML body, trailing newline)."""
    spec.validate()
    lines: List[str] = [spec_header(language), "", f"name: {_scalar(spec.name)}"]

    if spec.nodes:
        lines.append("nodes:")
        for n in spec.nodes:
            lines.append(f"  - name: {_scalar(n.name)}")
    else:
        lines.append("nodes: []")

    if spec.edges:
        lines.append("edges:")
    else:
        lines.append("edges: []")
    for e in spec.edges:
        lines.append(f"  - from: {_scalar(e.source)}")
        if isinstance(e, DirectEdge):
            lines.append(f"    to: {_scalar(e.target)}")
        elif isinstance(e, ConditionalEdge):
            lines.append(f"    condition: {_scalar(e.condition)}")
            lines.append(f"    paths: {_flow_list(e.paths)}")
        else:
            lines.append(f"    parallel: {_flow_list(e.targets)}")

    return "\n".join(lines) + "\n"


def parse_spec_text(text: str) -> WorkflowSpec:
    """Parse spec wire text back into a validated `WorkflowSpec`."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidSpec("spec text is empty")
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidSpec(f"spec text is not valid YAML: {e}") from e
    return spec_from_dict(raw)


def compile_to_text(
    graph: Graph,
    language: Union[Language, str] = Language.PYTHON,
    *,
    name: str = DEFAULT_SPEC_NAME,
) -> str:
    return render_spec_text(compile_graph(graph, name=name), language)
