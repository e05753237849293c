"""Artifact archive assembly (zip).

Packing is pure assembly: contents are written byte-for-byte as given and a
requested artifact is never dropped. Entry order is fixed so archives of the
same artifacts are comparable:

  spec.yml, stub.<ext>, implementation.<ext>, Dockerfile, docker-compose.yml, extras (sorted)
"""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..compiler.serialize import SPEC_FILENAME, implementation_filename, stub_filename
from ..core.languages import Language
from ..emitters.base import GeneratedCode
from ..errors import PackagingError
from ..logging import get_logger
from .scaffold import deployment_files

logger = get_logger(__name__)

# Fixed timestamp keeps archive bytes stable for identical inputs.
_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def _is_safe_relpath(p: str) -> bool:
    s = str(p or "").strip()
    if not s:
        return False
    if s.startswith(("/", "\\")):
        return False
    if ":" in s.split("/", 1)[0]:
        return False
    parts = [x for x in s.replace("\\", "/").split("/") if x]
    if not parts or any(x in {".", ".."} for x in parts):
        return False
    return True


@dataclass(frozen=True)
class ArtifactSet:
    """Everything that can go into one archive.

    `stub` / `implementation` may be None when they were not generated (for
    example a spec-only download); `extras` maps archive names to text.
    """

    spec_text: str
    language: Language = Language.PYTHON
    stub: Optional[str] = None
    implementation: Optional[str] = None
    extras: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_generated(cls, spec_text: str, code: GeneratedCode, *, extras: Optional[Dict[str, str]] = None) -> "ArtifactSet":
        return cls(
            spec_text=spec_text,
            language=code.language,
            stub=code.stub,
            implementation=code.implementation,
            extras=dict(extras or {}),
        )


@dataclass(frozen=True)
class PackedArtifacts:
    path: Path
    entries: List[str]


def archive_entries(artifacts: ArtifactSet, *, include_deployment: bool = False) -> List[Tuple[str, str]]:
    """Return `[(name, content)]` in archive order."""
    if not isinstance(artifacts.spec_text, str) or not artifacts.spec_text:
        raise PackagingError("spec text is required")
    lang = Language.parse(artifacts.language)

    entries: List[Tuple[str, str]] = [(SPEC_FILENAME, artifacts.spec_text)]
    if artifacts.stub is not None:
        entries.append((stub_filename(lang), artifacts.stub))
    if artifacts.implementation is not None:
        entries.append((implementation_filename(lang), artifacts.implementation))
    if include_deployment:
        entries.extend(deployment_files(lang).items())

    taken = {name for name, _ in entries}
    for name in sorted(artifacts.extras):
        if not _is_safe_relpath(name):
            raise PackagingError(f"Unsafe archive entry name '{name}'")
        rel = name.strip().replace("\\", "/")
        if rel in taken:
            raise PackagingError(f"Duplicate archive entry '{rel}'")
        content = artifacts.extras[name]
        if not isinstance(content, str):
            raise PackagingError(f"Archive entry '{rel}' must be text")
        taken.add(rel)
        entries.append((rel, content))
    return entries


def build_archive_bytes(artifacts: ArtifactSet, *, include_deployment: bool = False) -> bytes:
    """Return the zip archive for `artifacts` as bytes."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in archive_entries(artifacts, include_deployment=include_deployment):
            info = zipfile.ZipInfo(name, date_time=_ZIP_DATE_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            zf.writestr(info, content.encode("utf-8"))
    return buf.getvalue()


def pack_artifacts(
    artifacts: ArtifactSet,
    out_path: Union[str, Path],
    *,
    include_deployment: bool = False,
) -> PackedArtifacts:
    """Write the archive to `out_path` (parent directories are created)."""
    data = build_archive_bytes(artifacts, include_deployment=include_deployment)
    out = Path(out_path).expanduser().resolve()
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(data)
    except OSError as e:
        raise PackagingError(f"Failed to write archive to {out}: {e}") from e

    with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
        names = zf.namelist()
    logger.info("Packed %d artifacts into %s", len(names), out)
    return PackedArtifacts(path=out, entries=names)
