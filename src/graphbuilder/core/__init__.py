"""Configuration, shared enums and naming rules."""

from .config import BuilderConfig
from .languages import Language
from .names import RESERVED_NAMES, identifier_problem

__all__ = ["BuilderConfig", "Language", "RESERVED_NAMES", "identifier_problem"]
