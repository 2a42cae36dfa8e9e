"""Resolver configuration and its named defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from projassets.errors import ValidationError

VersionPreference = Literal["first", "highest"]

_VERSION_PREFERENCES: tuple[str, ...] = ("first", "highest")


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    binary_extensions: tuple[str, ...] = (".dll",)
    version_separator: str = "/"
    version_preference: VersionPreference = "first"
    lockfile_location: tuple[str, ...] = ("obj", "project.assets.json")
    source_tag: str = "Compile"
    reference_tag: str = "ProjectReference"
    path_attribute: str = "Include"
    output_folder: str = "bin"
    placeholder_folder: str = "placeholder"
    output_extension: str = ".dll"

    def __post_init__(self) -> None:
        if not self.binary_extensions:
            raise ValidationError(
                "At least one binary extension is required.",
                hint="Pass binary_extensions=('.dll',) or similar.",
            )
        for extension in self.binary_extensions:
            if not extension.startswith("."):
                raise ValidationError(
                    "Binary extensions must start with a dot.",
                    context={"extension": extension},
                )
        if not self.version_separator:
            raise ValidationError("Version separator must not be empty.")
        if self.version_preference not in _VERSION_PREFERENCES:
            raise ValidationError(
                "Unknown version preference.",
                hint="Use 'first' or 'highest'.",
                context={"version_preference": str(self.version_preference)},
            )
        if not self.lockfile_location:
            raise ValidationError("Lockfile location must name at least one path segment.")

    def is_binary(self, file: str) -> bool:
        return file.lower().endswith(tuple(ext.lower() for ext in self.binary_extensions))


DEFAULT_CONFIG = ResolverConfig()
