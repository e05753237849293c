"""graphbuilder.core.languages

Target languages for generated artifacts.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class Language(str, Enum):
    PYTHON = "python"
    TYPESCRIPT = "typescript"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @classmethod
    def parse(cls, value: Any) -> "Language":
        """Accept enum members, canonical names and the usual short aliases."""
        if isinstance(value, Language):
            return value
        if isinstance(value, Enum):
            value = value.value
        s = str(value or "").strip().lower()
        # Editors sometimes stringify the enum as "Language.X".
        if s.startswith("language."):
            s = s.split(".", 1)[1]
        lang = _ALIASES.get(s)
        if lang is None:
            supported = ", ".join(sorted(_ALIASES))
            raise ValueError(f"Unsupported language '{value}'. Supported: {supported}")
        return lang


_EXTENSIONS = {
    Language.PYTHON: "py",
    Language.TYPESCRIPT: "ts",
}

_ALIASES = {
    "python": Language.PYTHON,
    "py": Language.PYTHON,
    "typescript": Language.TYPESCRIPT,
    "ts": Language.TYPESCRIPT,
    "js": Language.TYPESCRIPT,
    "javascript": Language.TYPESCRIPT,
}
