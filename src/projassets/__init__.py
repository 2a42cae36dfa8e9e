"""Public package entrypoint for projassets."""

from .cache import ResolutionCache
from .config import ResolverConfig
from .descriptor import ProjectDescriptor, read_descriptor
from .errors import (
    CyclicProjectReferenceError,
    DescriptorError,
    DescriptorNotFoundError,
    MalformedDescriptorError,
    MalformedLockfileError,
    ProjAssetsError,
    ValidationError,
)
from .graph import ProjectGraphWalker, project_output_binary
from .lockfile import Lockfile, parse_lockfile, read_lockfile, resolve_binaries
from .models import ProjectNode, ProjectReference, ResolvedProjectOptions
from .observability import DiagnosticsLog

__all__ = [
    "CyclicProjectReferenceError",
    "DescriptorError",
    "DescriptorNotFoundError",
    "DiagnosticsLog",
    "Lockfile",
    "MalformedDescriptorError",
    "MalformedLockfileError",
    "ProjAssetsError",
    "ProjectDescriptor",
    "ProjectGraphWalker",
    "ProjectNode",
    "ProjectReference",
    "ResolutionCache",
    "ResolvedProjectOptions",
    "ResolverConfig",
    "ValidationError",
    "parse_lockfile",
    "project_output_binary",
    "read_descriptor",
    "read_lockfile",
    "resolve_binaries",
]
