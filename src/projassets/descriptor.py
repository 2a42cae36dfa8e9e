"""Project descriptor (MSBuild XML) reader."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from projassets.config import DEFAULT_CONFIG, ResolverConfig
from projassets.errors import DescriptorNotFoundError, MalformedDescriptorError


@dataclass(frozen=True, slots=True)
class ProjectDescriptor:
    path: Path
    source_files: tuple[Path, ...]
    project_references: tuple[Path, ...]


def read_descriptor(path: str | Path, *, config: ResolverConfig | None = None) -> ProjectDescriptor:
    """Read ``<Compile Include>`` and ``<ProjectReference Include>`` entries from *path*."""
    config = config or DEFAULT_CONFIG
    descriptor_path = normalize_path(path)
    try:
        tree = ET.parse(descriptor_path)
    except FileNotFoundError as exc:
        raise DescriptorNotFoundError(
            "Project descriptor does not exist.",
            context={"path": str(descriptor_path)},
        ) from exc
    except ET.ParseError as exc:
        raise MalformedDescriptorError(
            "Project descriptor is not well-formed XML.",
            hint=str(exc),
            context={"path": str(descriptor_path)},
        ) from exc

    root = tree.getroot()
    base = descriptor_path.parent
    return ProjectDescriptor(
        path=descriptor_path,
        source_files=tuple(
            _included_paths(root, config.source_tag, config.path_attribute, base=base)
        ),
        project_references=tuple(
            _included_paths(root, config.reference_tag, config.path_attribute, base=base)
        ),
    )


def normalize_path(path: str | Path) -> Path:
    """Return an absolute, normalized path using the host separator."""
    return Path(os.path.normpath(os.path.abspath(fix_separators(str(path)))))


def fix_separators(path: str) -> str:
    return path.replace("\\", os.sep)


def _included_paths(root: ET.Element, tag: str, attribute: str, *, base: Path) -> list[Path]:
    paths: list[Path] = []
    for element in root.iter():
        if _local_name(element.tag) != tag:
            continue
        value = element.get(attribute)
        if value is None:
            continue
        paths.append(normalize_path(base / fix_separators(value)))
    return paths


def _local_name(tag: object) -> str:
    # Comments and processing instructions carry a callable tag.
    if not isinstance(tag, str):
        return ""
    return tag.rpartition("}")[2]
