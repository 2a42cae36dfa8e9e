"""Lockfile parser and serializer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from projassets.errors import MalformedLockfileError
from projassets.lockfile.model import (
    LOCKFILE_DEFAULTS,
    Dependency,
    FrameworkDependency,
    Library,
    Lockfile,
    ProjectFramework,
)


def serialize_lockfile(lockfile: Lockfile) -> str:
    payload = {
        "targets": {
            target: {
                key: {
                    "type": dependency.kind,
                    "compile": {file: {} for file in dependency.compile},
                    "dependencies": dict(dependency.dependencies),
                }
                for key, dependency in dependencies.items()
            }
            for target, dependencies in lockfile.targets.items()
        },
        "libraries": {
            key: _library_payload(library) for key, library in lockfile.libraries.items()
        },
        "packageFolders": {folder: {} for folder in lockfile.package_folders},
        "project": {
            "frameworks": {
                name: {
                    "dependencies": {
                        dep_name: {
                            "target": dep.target,
                            "version": dep.version,
                            "autoReferenced": dep.auto_referenced,
                        }
                        for dep_name, dep in framework.dependencies.items()
                    }
                }
                for name, framework in lockfile.frameworks.items()
            }
        },
    }
    return json.dumps(payload, indent=2) + "\n"


def parse_lockfile(raw: str, *, separator: str = "/") -> Lockfile:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedLockfileError("Invalid lockfile JSON.", hint=str(exc)) from exc

    if not isinstance(payload, dict):
        raise MalformedLockfileError("Invalid lockfile payload type.")

    targets = _required_dict(payload, "targets")
    libraries = _required_dict(payload, "libraries")
    package_folders = _required_dict(payload, "packageFolders")
    project = _required_dict(payload, "project")
    frameworks = _required_dict(project, "frameworks", section="project.frameworks")

    return Lockfile(
        targets={
            target: {
                key: _parse_dependency(info, where=f"targets[{target}][{key}]")
                for key, info in _as_dict(entries, where=f"targets[{target}]").items()
            }
            for target, entries in targets.items()
        },
        libraries={
            key: _parse_library(info, where=f"libraries[{key}]")
            for key, info in libraries.items()
        },
        package_folders=tuple(package_folders),
        frameworks={
            name: _parse_framework(info, where=f"project.frameworks[{name}]")
            for name, info in frameworks.items()
        },
        separator=separator,
    )


def read_lockfile(path: str | Path, *, separator: str = "/") -> Lockfile:
    lock_path = Path(path)
    # Lockfiles written on Windows may carry a UTF-8 byte order mark.
    raw = lock_path.read_text(encoding="utf-8-sig")
    try:
        return parse_lockfile(raw, separator=separator)
    except MalformedLockfileError as exc:
        exc.context = {**exc.context, "path": str(lock_path)}
        raise


def _library_payload(library: Library) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": library.kind}
    if library.path is not None:
        payload["path"] = library.path
    payload["files"] = list(library.files)
    return payload


def _parse_dependency(info: Any, *, where: str) -> Dependency:
    data = _as_dict(info, where=where)
    compile_files = data.get("compile")
    dependencies = data.get("dependencies")
    return Dependency(
        kind=_optional_str(data, "type", LOCKFILE_DEFAULTS.kind, where=where),
        compile=(
            tuple(_as_dict(compile_files, where=f"{where}.compile"))
            if compile_files is not None
            else LOCKFILE_DEFAULTS.compile
        ),
        dependencies=(
            {
                str(name): str(version)
                for name, version in _as_dict(dependencies, where=f"{where}.dependencies").items()
            }
            if dependencies is not None
            else dict(LOCKFILE_DEFAULTS.dependencies)
        ),
    )


def _parse_library(info: Any, *, where: str) -> Library:
    data = _as_dict(info, where=where)
    files = data.get("files")
    if files is not None and not (
        isinstance(files, list) and all(isinstance(item, str) for item in files)
    ):
        raise MalformedLockfileError(
            "Invalid lockfile library file list.", context={"section": f"{where}.files"}
        )
    path = data.get("path", LOCKFILE_DEFAULTS.library_path)
    if path is not None and not isinstance(path, str):
        raise MalformedLockfileError(
            "Invalid lockfile library path.", context={"section": f"{where}.path"}
        )
    return Library(
        kind=_optional_str(data, "type", LOCKFILE_DEFAULTS.kind, where=where),
        path=path,
        files=tuple(files) if files is not None else LOCKFILE_DEFAULTS.files,
    )


def _parse_framework(info: Any, *, where: str) -> ProjectFramework:
    data = _as_dict(info, where=where)
    dependencies = data.get("dependencies")
    if dependencies is None:
        return ProjectFramework()
    return ProjectFramework(
        dependencies={
            name: _parse_framework_dependency(dep, where=f"{where}.dependencies[{name}]")
            for name, dep in _as_dict(dependencies, where=f"{where}.dependencies").items()
        }
    )


def _parse_framework_dependency(info: Any, *, where: str) -> FrameworkDependency:
    data = _as_dict(info, where=where)
    auto_referenced = data.get("autoReferenced", LOCKFILE_DEFAULTS.auto_referenced)
    if not isinstance(auto_referenced, bool):
        raise MalformedLockfileError(
            "Invalid lockfile `autoReferenced` value.", context={"section": where}
        )
    return FrameworkDependency(
        target=_optional_str(data, "target", LOCKFILE_DEFAULTS.target, where=where),
        version=_optional_str(data, "version", LOCKFILE_DEFAULTS.version, where=where),
        auto_referenced=auto_referenced,
    )


def _required_dict(
    payload: dict[str, Any], key: str, *, section: str | None = None
) -> dict[str, Any]:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise MalformedLockfileError(
            f"Invalid lockfile `{section or key}` value.",
            hint="Run the package restore again to regenerate the lockfile.",
            context={"section": section or key},
        )
    return value


def _as_dict(value: Any, *, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedLockfileError("Expected a JSON object.", context={"section": where})
    return value


def _optional_str(data: dict[str, Any], key: str, default: str, *, where: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise MalformedLockfileError(
            f"Invalid lockfile `{key}` value.", context={"section": where}
        )
    return value
