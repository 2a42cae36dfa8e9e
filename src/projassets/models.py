"""Typed project graph nodes and the resolved options handed to the compiler."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class ProjectNode:
    project_file: Path
    source_files: tuple[Path, ...]
    direct_references: tuple[ProjectNode, ...]
    binaries: tuple[Path, ...]
    output_binary: Path
    load_time: int

    def ancestors(self) -> tuple[ProjectNode, ...]:
        """Every transitively referenced node, each once, references before referrers."""
        ordered: dict[Path, ProjectNode] = {}

        def visit(node: ProjectNode) -> None:
            for reference in node.direct_references:
                if reference.project_file in ordered:
                    continue
                visit(reference)
                ordered.setdefault(reference.project_file, reference)

        visit(self)
        return tuple(ordered.values())


@dataclass(frozen=True, slots=True)
class ProjectReference:
    project_file: Path
    output_binary: Path
    options: ResolvedProjectOptions


@dataclass(frozen=True, slots=True)
class ResolvedProjectOptions:
    project_file: Path
    source_files: tuple[Path, ...]
    binaries: tuple[Path, ...]
    references: tuple[ProjectReference, ...]
    load_time: int

    @classmethod
    def from_node(
        cls,
        node: ProjectNode,
        *,
        built: dict[Path, ResolvedProjectOptions] | None = None,
    ) -> ResolvedProjectOptions:
        """Build options for *node*, sharing one options object per project file.

        *built* collects the options created so far; a project reached from
        several referrers reuses its entry instead of being rebuilt.
        """
        if built is None:
            built = {}
        existing = built.get(node.project_file)
        if existing is not None:
            return existing
        references = tuple(
            ProjectReference(
                project_file=ancestor.project_file,
                output_binary=ancestor.output_binary,
                options=cls.from_node(ancestor, built=built),
            )
            for ancestor in node.ancestors()
        )
        options = cls(
            project_file=node.project_file,
            source_files=node.source_files,
            binaries=node.binaries,
            references=references,
            load_time=node.load_time,
        )
        built[node.project_file] = options
        return options

    @property
    def referenced_projects(self) -> tuple[Path, ...]:
        return tuple(reference.project_file for reference in self.references)

    def compiler_arguments(self) -> list[str]:
        """Reference options in the order the compiler expects them."""
        arguments = ["--noframework"]
        arguments.extend(f"-r:{reference.output_binary}" for reference in self.references)
        arguments.extend(f"-r:{binary}" for binary in self.binaries)
        return arguments

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready snapshot.

        Every referenced project is written once under ``projects``; nested
        references are listed by project file rather than repeated inline.
        """
        payload = self._summary()
        payload["references"] = [
            {
                "project_file": str(reference.project_file),
                "output_binary": str(reference.output_binary),
            }
            for reference in self.references
        ]
        payload["projects"] = {
            str(reference.project_file): reference.options._summary()
            for reference in self.references
        }
        return payload

    def _summary(self) -> dict[str, Any]:
        return {
            "project_file": str(self.project_file),
            "source_files": [str(path) for path in self.source_files],
            "binaries": [str(path) for path in self.binaries],
            "references": [str(path) for path in self.referenced_projects],
            "load_time": self.load_time,
        }
