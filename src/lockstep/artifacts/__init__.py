"""Prebuilt artifact declarations and the build server they come from."""

from lockstep.artifacts.errors import (
    ArtifactFetchError,
    ArtifactNetworkError,
    ArtifactNotFoundError,
    ArtifactServerError,
)
from lockstep.artifacts.models import PackageManifest, PrebuiltArtifactDeclaration
from lockstep.artifacts.parser import parse_package_manifest
from lockstep.artifacts.resource import ArtifactResource, HttpArtifactResource

__all__ = [
    # Models
    "PackageManifest",
    "PrebuiltArtifactDeclaration",
    "parse_package_manifest",
    # Resource
    "ArtifactResource",
    "HttpArtifactResource",
    # Errors
    "ArtifactFetchError",
    "ArtifactNetworkError",
    "ArtifactNotFoundError",
    "ArtifactServerError",
]
