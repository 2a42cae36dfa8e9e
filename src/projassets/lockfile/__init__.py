"""Lockfile model, parser, and binary resolution."""

from .io import parse_lockfile, read_lockfile, serialize_lockfile
from .model import (
    LOCKFILE_DEFAULTS,
    PACKAGE_KIND,
    Dependency,
    FrameworkDependency,
    Library,
    Lockfile,
    LockfileDefaults,
    PackageIndex,
    ProjectFramework,
    version_sort_key,
)
from .resolve import lookup_version, resolve_binaries

__all__ = [
    "LOCKFILE_DEFAULTS",
    "PACKAGE_KIND",
    "Dependency",
    "FrameworkDependency",
    "Library",
    "Lockfile",
    "LockfileDefaults",
    "PackageIndex",
    "ProjectFramework",
    "lookup_version",
    "parse_lockfile",
    "read_lockfile",
    "resolve_binaries",
    "serialize_lockfile",
    "version_sort_key",
]
