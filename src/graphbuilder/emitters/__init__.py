"""graphbuilder.emitters

Spec → source code. Two interchangeable `Emitter` implementations (local
templates and the remote generation service) plus the single-file legacy
generator that works on the graph directly.
"""

from __future__ import annotations

from typing import Optional

from ..core.config import EMITTER_REMOTE, BuilderConfig
from .base import DecisionFunction, Emitter, GeneratedCode, SpecInput, decision_functions
from .legacy import generate_langgraph_code
from .local import LocalEmitter
from .remote import GenerateResponse, HttpResponse, HttpxRequestSender, RemoteEmitter, RequestSender


def create_emitter(config: Optional[BuilderConfig] = None, *, request_sender: Optional[RequestSender] = None) -> Emitter:
    """Return the emitter selected by `config.emitter`."""
    cfg = config or BuilderConfig()
    if cfg.emitter == EMITTER_REMOTE:
        return RemoteEmitter(url=cfg.generate_url, timeout_s=float(cfg.timeout_s), request_sender=request_sender)
    return LocalEmitter()


__all__ = [
    "Emitter",
    "GeneratedCode",
    "SpecInput",
    "DecisionFunction",
    "decision_functions",
    "LocalEmitter",
    "RemoteEmitter",
    "RequestSender",
    "HttpResponse",
    "HttpxRequestSender",
    "GenerateResponse",
    "create_emitter",
    "generate_langgraph_code",
]
