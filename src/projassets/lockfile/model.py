"""Lockfile typed model."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

PACKAGE_KIND = "package"


@dataclass(frozen=True, slots=True)
class LockfileDefaults:
    """Values substituted for optional lockfile fields."""

    kind: str = ""
    compile: tuple[str, ...] = ()
    dependencies: Mapping[str, str] = field(default_factory=dict)
    library_path: str | None = None
    files: tuple[str, ...] = ()
    target: str = "Package"
    version: str = ""
    auto_referenced: bool = False


LOCKFILE_DEFAULTS = LockfileDefaults()


@dataclass(frozen=True, slots=True)
class Dependency:
    kind: str
    compile: tuple[str, ...] = ()
    dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def is_package(self) -> bool:
        return self.kind == PACKAGE_KIND


@dataclass(frozen=True, slots=True)
class Library:
    kind: str
    path: str | None = None
    files: tuple[str, ...] = ()

    @property
    def is_package(self) -> bool:
        return self.kind == PACKAGE_KIND


@dataclass(frozen=True, slots=True)
class FrameworkDependency:
    target: str = LOCKFILE_DEFAULTS.target
    version: str = LOCKFILE_DEFAULTS.version
    auto_referenced: bool = LOCKFILE_DEFAULTS.auto_referenced


@dataclass(frozen=True, slots=True)
class ProjectFramework:
    dependencies: dict[str, FrameworkDependency] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PackageIndex:
    """Bare package name to versioned library keys, in lockfile order."""

    separator: str
    keys_by_name: dict[str, tuple[str, ...]]

    @classmethod
    def build(cls, keys: Iterable[str], *, separator: str = "/") -> PackageIndex:
        grouped: dict[str, list[str]] = {}
        for key in keys:
            name, sep, _ = key.partition(separator)
            if not sep:
                continue
            grouped.setdefault(name, []).append(key)
        return cls(
            separator=separator,
            keys_by_name={name: tuple(items) for name, items in grouped.items()},
        )

    def candidates(self, name: str) -> tuple[str, ...]:
        return self.keys_by_name.get(name, ())

    def version_of(self, key: str) -> str:
        return key.partition(self.separator)[2]


@dataclass(frozen=True, slots=True)
class Lockfile:
    targets: dict[str, dict[str, Dependency]]
    libraries: dict[str, Library]
    package_folders: tuple[str, ...]
    frameworks: dict[str, ProjectFramework]
    separator: str = "/"
    package_index: PackageIndex = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = PackageIndex.build(self.libraries, separator=self.separator)
        object.__setattr__(self, "package_index", index)

    def key_for(self, name: str, version: str) -> str:
        return f"{name}{self.separator}{version}"

    def direct_dependencies(self) -> list[tuple[str, str, FrameworkDependency]]:
        """Return ``(framework, name, dependency)`` for every declared dependency."""
        return [
            (framework_name, name, dependency)
            for framework_name, framework in self.frameworks.items()
            for name, dependency in framework.dependencies.items()
        ]


_VERSION_PART = re.compile(r"(\d+)|([^\d.\-+]+)")

# Each key part is (rank, value); a rank always pairs with one value type.
_PRERELEASE = -1
_TEXT = 0
_NUMBER = 1


def version_sort_key(version: str) -> tuple[tuple[int, int | str], ...]:
    """Order dotted versions numerically; a prerelease sorts below its release."""
    version = version.partition("+")[0]
    release, _, prerelease = version.partition("-")
    parts: list[tuple[int, int | str]] = []
    for piece in release.split("."):
        parts.append((_NUMBER, int(piece)) if piece.isdigit() else (_TEXT, piece))
    # Four numeric parts for NuGet; pad so 1.0 == 1.0.0.0.
    while len(parts) < 4:
        parts.append((_NUMBER, 0))
    if prerelease:
        parts.append((_PRERELEASE, 0))
        for match in _VERSION_PART.finditer(prerelease):
            number, text = match.groups()
            parts.append((_NUMBER, int(number)) if number is not None else (_TEXT, text))
    else:
        parts.append((_NUMBER, 0))
    return tuple(parts)
