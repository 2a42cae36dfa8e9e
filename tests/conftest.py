"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pytest

from builders import WriteProject, descriptor_xml
from projassets.observability import DiagnosticsLog


@pytest.fixture
def diagnostics() -> DiagnosticsLog:
    return DiagnosticsLog()


@pytest.fixture
def write_project(tmp_path: Path) -> WriteProject:
    """Write ``<tmp>/<name>/<name>.fsproj`` and, optionally, its lockfile."""

    def _write(
        name: str,
        *,
        sources: Iterable[str] = (),
        references: Iterable[str] = (),
        assets: Mapping[str, Any] | None = None,
    ) -> Path:
        project_dir = tmp_path / name
        project_dir.mkdir(parents=True, exist_ok=True)
        project_file = project_dir / f"{name}.fsproj"
        project_file.write_text(
            descriptor_xml(sources=sources, references=references), encoding="utf-8"
        )
        if assets is not None:
            lock_path = project_dir / "obj" / "project.assets.json"
            lock_path.parent.mkdir(parents=True, exist_ok=True)
            lock_path.write_text(json.dumps(assets), encoding="utf-8")
        return project_file

    return _write
