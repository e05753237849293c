"""
graphbuilder

Visual agent-graph → canonical workflow spec → LangGraph code.

This package provides the non-UI core of a graph builder:
- graph model and an editing session (node / edge / branch-group edits)
- edge classification into direct, conditional and parallel transitions
- a deterministic spec compiler and its canonical YAML text
- code emitters (local templates, remote generation service, legacy single-file)
- zip packaging of spec, stub, implementation and deployment scaffolding
"""

from .compiler import (
    END,
    START,
    ConditionalEdge,
    DirectEdge,
    ParallelEdge,
    SpecNode,
    WorkflowSpec,
    compile_graph,
    compile_spec,
    compile_to_text,
    parse_spec_text,
    render_spec_text,
)
from .core import BuilderConfig, Language
from .emitters import (
    Emitter,
    GeneratedCode,
    LocalEmitter,
    RemoteEmitter,
    create_emitter,
    generate_langgraph_code,
)
from .errors import (
    AmbiguousLabel,
    ConfigError,
    GraphBuilderError,
    InvalidGraph,
    InvalidSpec,
    PackagingError,
    RemoteGenerationFailure,
)
from .graph import (
    ExecutionType,
    Graph,
    GraphEdge,
    GraphNode,
    GraphSession,
    NodeKind,
    classify_edges,
    graph_to_json,
    load_graph_json,
)
from .packaging import ArtifactSet, PackedArtifacts, build_archive_bytes, pack_artifacts

__all__ = [
    # Graph model
    "NodeKind",
    "ExecutionType",
    "GraphNode",
    "GraphEdge",
    "Graph",
    "GraphSession",
    "load_graph_json",
    "graph_to_json",
    "classify_edges",
    # Spec
    "START",
    "END",
    "SpecNode",
    "DirectEdge",
    "ConditionalEdge",
    "ParallelEdge",
    "WorkflowSpec",
    "compile_spec",
    "compile_graph",
    "render_spec_text",
    "parse_spec_text",
    "compile_to_text",
    # Emitters
    "Emitter",
    "GeneratedCode",
    "LocalEmitter",
    "RemoteEmitter",
    "create_emitter",
    "generate_langgraph_code",
    # Packaging
    "ArtifactSet",
    "PackedArtifacts",
    "build_archive_bytes",
    "pack_artifacts",
    # Config
    "BuilderConfig",
    "Language",
    # Errors
    "GraphBuilderError",
    "InvalidGraph",
    "AmbiguousLabel",
    "InvalidSpec",
    "RemoteGenerationFailure",
    "PackagingError",
    "ConfigError",
]
