"""Project reference graph traversal."""

from __future__ import annotations

from pathlib import Path

from projassets.config import DEFAULT_CONFIG, ResolverConfig
from projassets.descriptor import normalize_path, read_descriptor
from projassets.errors import CyclicProjectReferenceError
from projassets.lockfile.io import read_lockfile
from projassets.lockfile.resolve import resolve_binaries
from projassets.models import ProjectNode, ResolvedProjectOptions
from projassets.observability import DiagnosticsLog


class ProjectGraphWalker:
    """Resolve a project descriptor and everything it references.

    Each descriptor reachable from the root is read and resolved once per
    call. A reference back onto the descriptors currently being visited
    raises :class:`CyclicProjectReferenceError`.
    """

    def __init__(
        self,
        *,
        config: ResolverConfig | None = None,
        diagnostics: DiagnosticsLog | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()

    def resolve_project(self, path: str | Path) -> ResolvedProjectOptions:
        root = self.resolve_node(path)
        options = ResolvedProjectOptions.from_node(root)
        self._log_summary(options)
        return options

    def resolve_node(self, path: str | Path) -> ProjectNode:
        return self._visit(normalize_path(path), stack=[], resolved={})

    def lockfile_path(self, project_file: Path) -> Path:
        return project_file.parent.joinpath(*self.config.lockfile_location)

    def project_binaries(self, project_file: Path) -> tuple[Path, ...]:
        lock_path = self.lockfile_path(project_file)
        if not lock_path.is_file():
            self.diagnostics.log(
                operation="read_lockfile",
                message=f"No assets file at {lock_path}",
                project=project_file,
                level="warning",
            )
            return ()
        lockfile = read_lockfile(lock_path, separator=self.config.version_separator)
        return resolve_binaries(
            lockfile,
            config=self.config,
            diagnostics=self.diagnostics,
            project=project_file,
        )

    def _visit(
        self,
        project_file: Path,
        *,
        stack: list[Path],
        resolved: dict[Path, ProjectNode],
    ) -> ProjectNode:
        if project_file in resolved:
            return resolved[project_file]
        if project_file in stack:
            cycle = [*stack[stack.index(project_file) :], project_file]
            raise CyclicProjectReferenceError(cycle)

        # Read the timestamp first so an edit during resolution triggers a reload.
        load_time = project_file.stat().st_mtime_ns if project_file.exists() else 0
        descriptor = read_descriptor(project_file, config=self.config)
        stack.append(project_file)
        try:
            references = tuple(
                self._visit(reference, stack=stack, resolved=resolved)
                for reference in descriptor.project_references
            )
        finally:
            stack.pop()

        node = ProjectNode(
            project_file=project_file,
            source_files=descriptor.source_files,
            direct_references=references,
            binaries=self.project_binaries(project_file),
            output_binary=project_output_binary(project_file, config=self.config),
            load_time=load_time,
        )
        resolved[project_file] = node
        return node

    def _log_summary(self, options: ResolvedProjectOptions) -> None:
        self.diagnostics.log(
            operation="resolve_project",
            message=f"Project {options.project_file}",
            project=options.project_file,
            extra={
                "references": [str(path) for path in options.binaries],
                "projects": [str(path) for path in options.referenced_projects],
                "sources": [str(path) for path in options.source_files],
            },
        )


def project_output_binary(
    project_file: str | Path, *, config: ResolverConfig | None = None
) -> Path:
    """Locate the build output of *project_file*, or a stable placeholder for it.

    ``app/App.fsproj`` maps to the first ``app/bin/<config>/<target>/App.dll``
    that exists, else to ``app/bin/placeholder/App.dll``.
    """
    config = config or DEFAULT_CONFIG
    project_path = Path(project_file)
    bin_dir = project_path.parent / config.output_folder
    name = project_path.stem + config.output_extension
    if bin_dir.is_dir():
        for configuration in sorted(p for p in bin_dir.iterdir() if p.is_dir()):
            for target in sorted(p for p in configuration.iterdir() if p.is_dir()):
                candidate = target / name
                if candidate.is_file():
                    return candidate
    return bin_dir / config.placeholder_folder / name
