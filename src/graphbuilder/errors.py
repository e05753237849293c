"""graphbuilder.errors

Error taxonomy shared by the classifier, compiler, emitters and packer.

All errors derive from `ValueError` so hosts that already treat bad input as a
`ValueError` keep working.
"""

from __future__ import annotations

from typing import Optional


class GraphBuilderError(ValueError):
    """Base class for graphbuilder errors."""


class InvalidGraph(GraphBuilderError):
    """Raised when a graph snapshot cannot be compiled (cannot generate code)."""


class AmbiguousLabel(InvalidGraph):
    """Raised when two distinct graph elements resolve to the same generated name."""

    def __init__(self, label: str, message: Optional[str] = None):
        self.label = label
        super().__init__(message or f"Ambiguous label '{label}'")


class InvalidSpec(GraphBuilderError):
    """Raised when canonical spec text cannot be parsed back into a spec."""


class RemoteGenerationFailure(GraphBuilderError):
    """Raised when the remote generation service fails for one language.

    The canonical spec stays valid; callers may resubmit it.
    """

    def __init__(self, language: str, message: str, *, status_code: Optional[int] = None):
        self.language = language
        self.status_code = status_code
        super().__init__(f"[{language}] {message}")


class PackagingError(GraphBuilderError):
    """Raised when an artifact archive cannot be assembled."""


class ConfigError(GraphBuilderError):
    """Raised when configuration values are invalid."""
