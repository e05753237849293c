"""graphbuilder.compiler

Graph snapshot → canonical workflow spec (value + wire text).
"""

from .compiler import compile_graph, compile_spec, node_name, normalize_label, validate_graph
from .serialize import (
    SPEC_FILENAME,
    compile_to_text,
    implementation_filename,
    parse_spec_text,
    render_spec_text,
    spec_header,
    stub_filename,
)
from .spec import END, START, ConditionalEdge, DirectEdge, ParallelEdge, SpecNode, WorkflowSpec, spec_from_dict

__all__ = [
    "START",
    "END",
    "SpecNode",
    "DirectEdge",
    "ConditionalEdge",
    "ParallelEdge",
    "WorkflowSpec",
    "spec_from_dict",
    "compile_spec",
    "compile_graph",
    "validate_graph",
    "node_name",
    "normalize_label",
    "render_spec_text",
    "parse_spec_text",
    "compile_to_text",
    "spec_header",
    "stub_filename",
    "implementation_filename",
    "SPEC_FILENAME",
]
