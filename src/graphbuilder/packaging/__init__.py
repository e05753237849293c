"""graphbuilder.packaging

Bundle spec text, generated code and optional deployment scaffolding into a
zip archive.
"""

from .packer import ArtifactSet, PackedArtifacts, archive_entries, build_archive_bytes, pack_artifacts
from .scaffold import COMPOSE_NAME, DOCKERFILE_NAME, deployment_files

__all__ = [
    "ArtifactSet",
    "PackedArtifacts",
    "archive_entries",
    "build_archive_bytes",
    "pack_artifacts",
    "deployment_files",
    "DOCKERFILE_NAME",
    "COMPOSE_NAME",
]
