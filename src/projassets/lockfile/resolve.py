"""Binary dependency resolution over a parsed lockfile.

The lockfile is interpreted in six steps:

1. every package declared under ``project.frameworks`` seeds the walk;
2. ``targets[*][key].dependencies`` edges give the transitive closure;
3. each package in the closure contributes the binaries in its ``compile`` map;
4. auto-referenced packages contribute every binary in ``libraries[key].files``;
5. both file sets are merged without duplicates;
6. each ``(key, file)`` pair is located under the first package folder holding it.
"""

from __future__ import annotations

import os
from pathlib import Path

from projassets.config import DEFAULT_CONFIG, ResolverConfig
from projassets.errors import ValidationError
from projassets.lockfile.model import Lockfile, version_sort_key
from projassets.observability import DiagnosticsLog

FileRef = tuple[str, str]


def resolve_binaries(
    lockfile: Lockfile,
    *,
    config: ResolverConfig | None = None,
    diagnostics: DiagnosticsLog | None = None,
    project: str | Path | None = None,
) -> tuple[Path, ...]:
    """Return absolute paths of every binary needed to compile against *lockfile*.

    Inconsistencies in the lockfile never abort resolution; they are recorded
    once on *diagnostics* and the affected files are left out.
    """
    config = config or DEFAULT_CONFIG
    _ensure_same_separator(lockfile, config)
    resolver = _Resolver(
        lockfile,
        config=config,
        diagnostics=diagnostics if diagnostics is not None else DiagnosticsLog(),
        project=project,
    )
    return resolver.run()


def lookup_version(
    lockfile: Lockfile,
    name: str,
    *,
    config: ResolverConfig | None = None,
    diagnostics: DiagnosticsLog | None = None,
) -> str | None:
    """Map a bare package name to its versioned key in ``libraries``."""
    config = config or DEFAULT_CONFIG
    _ensure_same_separator(lockfile, config)
    candidates = lockfile.package_index.candidates(name)
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    if config.version_preference == "highest":
        index = lockfile.package_index
        return max(candidates, key=lambda key: version_sort_key(index.version_of(key)))
    if diagnostics is not None:
        diagnostics.log_once(
            operation="lookup_version",
            message=(
                f"Several versions of {name} in libraries, using {candidates[0]}: "
                + ", ".join(candidates)
            ),
        )
    return candidates[0]


class _Resolver:
    def __init__(
        self,
        lockfile: Lockfile,
        *,
        config: ResolverConfig,
        diagnostics: DiagnosticsLog,
        project: str | Path | None,
    ) -> None:
        self.lockfile = lockfile
        self.config = config
        self.diagnostics = diagnostics
        self.project = project

    def run(self) -> tuple[Path, ...]:
        seeds = self._seed_keys()
        closure = self._transitive_closure(seeds)
        selected = dict.fromkeys(self._compile_files(closure))
        selected.update(dict.fromkeys(self._auto_referenced_files()))

        resolved: dict[Path, None] = {}
        for key, file in selected:
            relative = self._library_file(key, file)
            if relative is None:
                continue
            absolute = self._find_absolute_path(relative)
            if absolute is not None:
                resolved[absolute] = None
        return tuple(resolved)

    def _seed_keys(self) -> list[str]:
        seeds: dict[str, None] = {}
        for _, name, _ in self.lockfile.direct_dependencies():
            key = self._lookup(name)
            if key is not None:
                seeds[key] = None
        return list(seeds)

    def _transitive_closure(self, seeds: list[str]) -> list[str]:
        closure: dict[str, None] = {}
        stack = list(reversed(seeds))
        while stack:
            key = stack.pop()
            if key in closure:
                continue
            closure[key] = None
            edges: list[str] = []
            for target_name, packages in self.lockfile.targets.items():
                dependency = packages.get(key)
                if dependency is None:
                    self._warn(f"Couldn't find {key} in targets[{target_name}]", "closure")
                    continue
                for name, version in dependency.dependencies.items():
                    edges.append(self.lockfile.key_for(name, version))
            stack.extend(edge for edge in reversed(edges) if edge not in closure)
        return list(closure)

    def _compile_files(self, closure: list[str]) -> list[FileRef]:
        pairs: list[FileRef] = []
        for key in closure:
            for target_name, packages in self.lockfile.targets.items():
                dependency = packages.get(key)
                if dependency is None:
                    self._warn(f"Couldn't find {key} in targets[{target_name}]", "compile_files")
                    continue
                if not dependency.is_package:
                    continue
                for file in dependency.compile:
                    if self.config.is_binary(file):
                        pairs.append((key, file))
                    else:
                        self._debug(
                            f"Ignoring non-binary compile file {file} of {key}", "compile_files"
                        )
        return pairs

    def _auto_referenced_files(self) -> list[FileRef]:
        pairs: list[FileRef] = []
        for _, name, dependency in self.lockfile.direct_dependencies():
            if not dependency.auto_referenced:
                continue
            key = self._lookup(name)
            library = self.lockfile.libraries.get(key) if key is not None else None
            if key is None or library is None:
                self._warn(
                    f"Couldn't find auto-referenced dependency {name} in libraries",
                    "auto_referenced",
                )
                continue
            for file in library.files:
                if self.config.is_binary(file):
                    pairs.append((key, file))
        return pairs

    def _library_file(self, key: str, file: str) -> str | None:
        library = self.lockfile.libraries.get(key)
        if library is None:
            self._warn(f"Dependency {key} not in libraries", "library_file")
            return None
        if not library.is_package:
            self._debug(f"Skipping {key} because its type is {library.kind!r}", "library_file")
            return None
        if library.path is None:
            self._warn(f"Skipping {key} because no path in libraries[{key}]", "library_file")
            return None
        if file not in library.files:
            self._warn(f"DLL {file} is not in libraries[{key}].files", "library_file")
            return None
        return f"{library.path.rstrip('/')}/{file}"

    def _find_absolute_path(self, relative: str) -> Path | None:
        for folder in self.lockfile.package_folders:
            candidate = os.path.normpath(
                os.path.abspath(os.path.join(_native(folder), _native(relative)))
            )
            if os.path.isfile(candidate):
                return Path(candidate)
        self._debug(f"{relative} not found in any package folder", "find_absolute_path")
        return None

    def _lookup(self, name: str) -> str | None:
        return lookup_version(
            self.lockfile, name, config=self.config, diagnostics=self.diagnostics
        )

    def _warn(self, message: str, operation: str) -> None:
        self.diagnostics.log_once(operation=operation, message=message, project=self.project)

    def _debug(self, message: str, operation: str) -> None:
        self.diagnostics.log_once(
            operation=operation, message=message, project=self.project, level="debug"
        )


def _native(path: str) -> str:
    return path.replace("\\", os.sep).replace("/", os.sep)


def _ensure_same_separator(lockfile: Lockfile, config: ResolverConfig) -> None:
    if lockfile.separator != config.version_separator:
        raise ValidationError(
            "Lockfile and resolver config disagree on the version separator.",
            hint="Parse the lockfile with separator=config.version_separator.",
            context={
                "lockfile_separator": lockfile.separator,
                "config_separator": config.version_separator,
            },
        )
