"""Emitter interface shared by the local and remote code generators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Tuple, Union

from ..compiler.serialize import parse_spec_text
from ..compiler.spec import END, START, WorkflowSpec
from ..core.languages import Language

SpecInput = Union[WorkflowSpec, str]

PARALLEL_FUNCTION_BASE = "parallel_execution"


@dataclass(frozen=True)
class GeneratedCode:
    """Stub (signatures + registration) and implementation (placeholder bodies)."""

    language: Language
    stub: str
    implementation: str

    @property
    def stub_filename(self) -> str:
        return f"stub.{self.language.extension}"

    @property
    def implementation_filename(self) -> str:
        return f"implementation.{self.language.extension}"


class Emitter(Protocol):
    def emit(self, spec: SpecInput, language: Union[Language, str]) -> GeneratedCode: ...


@dataclass(frozen=True)
class DecisionFunction:
    """One generated decision function (a conditional router or a parallel fan-out)."""

    name: str
    source: str
    targets: Tuple[str, ...]
    parallel: bool = False


def coerce_spec(spec: SpecInput) -> WorkflowSpec:
    if isinstance(spec, WorkflowSpec):
        spec.validate()
        return spec
    if isinstance(spec, str):
        return parse_spec_text(spec)
    raise TypeError(f"Expected WorkflowSpec or spec text, got {type(spec).__name__}")


def decision_functions(spec: WorkflowSpec) -> List[DecisionFunction]:
    """Decision functions in spec order.

    Parallel records carry no name on the wire, so their fan-out functions are
    named `parallel_execution` (or `parallel_execution_N` when there are several).
    """
    out: List[DecisionFunction] = [
        DecisionFunction(name=e.condition, source=e.source, targets=tuple(e.paths)) for e in spec.conditional_edges
    ]
    taken = {spec.name} | set(spec.node_names) | {f.name for f in out}
    parallel = spec.parallel_edges
    for i, e in enumerate(parallel, start=1):
        name = PARALLEL_FUNCTION_BASE if len(parallel) == 1 else f"{PARALLEL_FUNCTION_BASE}_{i}"
        n = i
        while name in taken:
            n += 1
            name = f"{PARALLEL_FUNCTION_BASE}_{n}"
        taken.add(name)
        out.append(DecisionFunction(name=name, source=e.source, targets=tuple(e.targets), parallel=True))
    return out


def node_ref(name: str) -> str:
    """Source expression for a node reference (sentinels map to the START/END constants).

    Both target languages import the constants under the same names.
    """
    if name == START:
        return "START"
    if name == END:
        return "END"
    return f'"{name}"'
