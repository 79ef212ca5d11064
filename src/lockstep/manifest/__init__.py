"""Project manifest models, parsing and workspace traversal."""

from lockstep.manifest.models import DependencyEdge, ManifestModel, WorkspaceDescriptor
from lockstep.manifest.parser import parse_manifest
from lockstep.manifest.walker import ManifestWalker

__all__ = [
    "DependencyEdge",
    "ManifestModel",
    "ManifestWalker",
    "WorkspaceDescriptor",
    "parse_manifest",
]
