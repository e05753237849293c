"""graphbuilder command line.

    graphbuilder compile graph.json [--name NAME] [--language L]
    graphbuilder generate graph.json|spec.yml --language L [--emitter local|remote] [--stub-only]
    graphbuilder legacy graph.json --language L
    graphbuilder pack graph.json --out agent.zip --language L [--deployment]

Exit codes: 0 success, 1 remote/packaging/IO failure, 2 invalid graph, spec or configuration.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .compiler import compile_graph, render_spec_text
from .core.config import BuilderConfig, EMITTER_LOCAL, EMITTER_REMOTE
from .core.languages import Language
from .emitters import GeneratedCode, create_emitter, generate_langgraph_code
from .errors import GraphBuilderError, PackagingError, RemoteGenerationFailure
from .graph.models import Graph, load_graph_json
from .logging import get_logger
from .packaging import ArtifactSet, pack_artifacts

logger = get_logger(__name__)

_SPEC_SUFFIXES = (".yml", ".yaml")


def _read_graph(path: str) -> Graph:
    raw = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
    return load_graph_json(raw)


def _config(args: argparse.Namespace) -> BuilderConfig:
    base = BuilderConfig.from_env()
    return base.with_overrides(
        spec_name=getattr(args, "name", None),
        emitter=getattr(args, "emitter", None),
        default_language=getattr(args, "language", None),
    )


def _emit(cfg: BuilderConfig, spec: Any, language: Language) -> GeneratedCode:
    emitter = create_emitter(cfg)
    try:
        return emitter.emit(spec, language)
    finally:
        close = getattr(emitter, "close", None)
        if callable(close):
            close()


def _cmd_compile(args: argparse.Namespace) -> int:
    cfg = _config(args)
    spec = compile_graph(_read_graph(args.graph), name=cfg.spec_name)
    sys.stdout.write(render_spec_text(spec, cfg.language))
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    cfg = _config(args)
    src = Path(args.graph)
    spec: Any
    if src.suffix.lower() in _SPEC_SUFFIXES:
        spec = src.expanduser().read_text(encoding="utf-8")
    else:
        spec = compile_graph(_read_graph(args.graph), name=cfg.spec_name)

    code = _emit(cfg, spec, cfg.language)
    sys.stdout.write(code.stub if args.stub_only else code.implementation)
    return 0


def _cmd_legacy(args: argparse.Namespace) -> int:
    graph = _read_graph(args.graph)
    sys.stdout.write(generate_langgraph_code(graph.nodes, graph.edges, args.language or Language.PYTHON))
    return 0


def _cmd_pack(args: argparse.Namespace) -> int:
    cfg = _config(args)
    lang = cfg.language
    spec = compile_graph(_read_graph(args.graph), name=cfg.spec_name)
    spec_text = render_spec_text(spec, lang)

    code = _emit(cfg, spec_text, lang)
    include_deployment = bool(args.deployment) or cfg.include_deployment
    packed = pack_artifacts(ArtifactSet.from_generated(spec_text, code), args.out, include_deployment=include_deployment)
    sys.stdout.write(f"{packed.path}\n")
    for name in packed.entries:
        sys.stdout.write(f"  {name}\n")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="graphbuilder", add_help=True)
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log to stderr (-v info, -vv debug).")
    sub = parser.add_subparsers(dest="command", required=True)

    def _language(p: argparse.ArgumentParser) -> None:
        p.add_argument("--language", "-l", default=None, help="Target language: python | typescript (default from env).")

    p = sub.add_parser("compile", help="Print the canonical spec for a graph JSON file.")
    p.add_argument("graph", help="Path to the graph JSON ({nodes, edges}).")
    p.add_argument("--name", default=None, help="Workflow name written to the spec.")
    _language(p)
    p.set_defaults(func=_cmd_compile)

    p = sub.add_parser("generate", help="Generate stub/implementation for a graph JSON or spec.yml file.")
    p.add_argument("graph", help="Path to a graph JSON file or canonical spec text (.yml/.yaml).")
    p.add_argument("--name", default=None, help="Workflow name (graph input only).")
    p.add_argument("--emitter", choices=[EMITTER_LOCAL, EMITTER_REMOTE], default=None)
    p.add_argument("--stub-only", action="store_true", help="Print the stub instead of the implementation.")
    _language(p)
    p.set_defaults(func=_cmd_generate)

    p = sub.add_parser("legacy", help="Print single-file LangGraph code generated directly from the graph.")
    p.add_argument("graph", help="Path to the graph JSON ({nodes, edges}).")
    _language(p)
    p.set_defaults(func=_cmd_legacy)

    p = sub.add_parser("pack", help="Write a zip with spec.yml, stub and implementation.")
    p.add_argument("graph", help="Path to the graph JSON ({nodes, edges}).")
    p.add_argument("--out", required=True, help="Archive path to write.")
    p.add_argument("--name", default=None, help="Workflow name written to the spec.")
    p.add_argument("--emitter", choices=[EMITTER_LOCAL, EMITTER_REMOTE], default=None)
    p.add_argument("--deployment", action="store_true", help="Include Dockerfile and docker-compose.yml.")
    _language(p)
    p.set_defaults(func=_cmd_pack)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    logger.debug("Running command %s", args.command)
    try:
        return int(args.func(args))
    except (RemoteGenerationFailure, PackagingError) as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1
    except GraphBuilderError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 2
    except json.JSONDecodeError as e:
        sys.stderr.write(f"Error: {args.graph} is not valid JSON: {e}\n")
        return 2
    except (ValueError, TypeError) as e:
        # Unsupported language names and malformed graph payloads.
        sys.stderr.write(f"Error: {e}\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
