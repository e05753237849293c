"""graphbuilder.core.config

Builder configuration: spec naming, emitter selection and generation service
settings.

The config is a plain frozen dataclass. `BuilderConfig.from_env()` is the only
place that reads the process environment; everything downstream receives the
resolved values explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..errors import ConfigError
from .languages import Language
from .names import identifier_problem

DEFAULT_SPEC_NAME = "CustomAgent"
DEFAULT_GENERATE_URL = "https://langgraph-gen-570601939772.us-central1.run.app/generate"
DEFAULT_TIMEOUT_S = 60.0

EMITTER_LOCAL = "local"
EMITTER_REMOTE = "remote"
_EMITTERS = (EMITTER_LOCAL, EMITTER_REMOTE)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class BuilderConfig:
    """Configuration for compiling graphs and generating code.

    Attributes:
        spec_name: Value of the spec's `name` field (the generated workflow aggregate).
        emitter: `local` (in-process templates) or `remote` (generation service).
        generate_url: Endpoint of the remote generation service.
        timeout_s: Per-request timeout for the remote emitter.
        default_language: Language used when callers do not pick one.
        include_deployment: Whether archives include Dockerfile/docker-compose scaffolding.

    Example:
        >>> cfg = BuilderConfig(emitter="remote", timeout_s=10)
        >>> cfg.language
        <Language.PYTHON: 'python'>
    """

    spec_name: str = DEFAULT_SPEC_NAME
    emitter: str = EMITTER_LOCAL
    generate_url: str = DEFAULT_GENERATE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    default_language: str = Language.PYTHON.value
    include_deployment: bool = False

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        problem = identifier_problem(self.spec_name)
        if problem is not None:
            raise ConfigError(f"spec_name '{self.spec_name}' {problem}")
        if self.emitter not in _EMITTERS:
            raise ConfigError(f"emitter must be one of {list(_EMITTERS)}, got '{self.emitter}'")
        if not isinstance(self.generate_url, str) or not self.generate_url.startswith(("http://", "https://")):
            raise ConfigError(f"generate_url must be an http(s) URL, got '{self.generate_url}'")
        try:
            timeout = float(self.timeout_s)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"timeout_s must be a number, got '{self.timeout_s}'") from e
        if timeout <= 0:
            raise ConfigError("timeout_s must be positive")
        try:
            Language.parse(self.default_language)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    @property
    def language(self) -> Language:
        return Language.parse(self.default_language)

    def with_overrides(self, **overrides: Any) -> "BuilderConfig":
        """Return a copy with the non-None overrides applied (string values are stripped)."""
        clean = {k: v.strip() if isinstance(v, str) else v for k, v in overrides.items() if v is not None}
        return replace(self, **clean)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BuilderConfig":
        env = os.environ if environ is None else environ

        def _get(name: str) -> Optional[str]:
            v = env.get(name)
            if isinstance(v, str) and v.strip():
                return v.strip()
            return None

        kwargs: dict[str, Any] = {}
        name = _get("GRAPHBUILDER_SPEC_NAME")
        if name is not None:
            kwargs["spec_name"] = name
        emitter = _get("GRAPHBUILDER_EMITTER")
        if emitter is not None:
            kwargs["emitter"] = emitter.lower()
        url = _get("GRAPHBUILDER_GENERATE_URL")
        if url is not None:
            kwargs["generate_url"] = url
        timeout = _get("GRAPHBUILDER_TIMEOUT_S")
        if timeout is not None:
            try:
                kwargs["timeout_s"] = float(timeout)
            except ValueError as e:
                raise ConfigError(f"GRAPHBUILDER_TIMEOUT_S must be a number, got '{timeout}'") from e
        lang = _get("GRAPHBUILDER_LANGUAGE")
        if lang is not None:
            kwargs["default_language"] = lang
        deploy = env.get("GRAPHBUILDER_INCLUDE_DEPLOYMENT")
        if deploy is not None:
            flag = str(deploy).strip().lower()
            if flag in _TRUTHY:
                kwargs["include_deployment"] = True
            elif flag in _FALSY:
                kwargs["include_deployment"] = False
            else:
                raise ConfigError(f"GRAPHBUILDER_INCLUDE_DEPLOYMENT must be a boolean, got '{deploy}'")
        return cls(**kwargs)
