"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from pathlib import Path
from typing import ClassVar


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    VALIDATION = "E_VALIDATION"
    LOCKFILE = "E_LOCKFILE"
    DESCRIPTOR = "E_DESCRIPTOR"
    PROJECT_GRAPH = "E_PROJECT_GRAPH"


class ProjAssetsError(Exception):
    """Hard resolution failure.

    Subclasses pick their code through ``error_code``. ``context`` names the
    input that failed (a lockfile section, a descriptor path) and is rendered
    after the message as ``key=value`` pairs.
    """

    error_code: ClassVar[ErrorCode]

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = self.error_code.value
        self.hint = hint
        self.context: Mapping[str, str] = dict(context or {})

    def __str__(self) -> str:
        text = self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items() if v)
        if details:
            text = f"{text} [{details}]"
        if self.hint:
            text = f"{text}\nHint: {self.hint}"
        return text

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(ProjAssetsError):
    error_code = ErrorCode.VALIDATION


class MalformedLockfileError(ProjAssetsError):
    error_code = ErrorCode.LOCKFILE


class DescriptorError(ProjAssetsError):
    error_code = ErrorCode.DESCRIPTOR


class MalformedDescriptorError(DescriptorError):
    pass


class DescriptorNotFoundError(DescriptorError):
    pass


class CyclicProjectReferenceError(ProjAssetsError):
    """Raised when a project reference points back onto the traversal stack.

    ``cycle`` starts and ends with the project that closes the loop.
    """

    error_code = ErrorCode.PROJECT_GRAPH

    def __init__(self, cycle: Sequence[Path], *, hint: str | None = None) -> None:
        self.cycle = tuple(cycle)
        super().__init__(
            "Project references form a cycle.",
            hint=hint or "Remove one of the <ProjectReference> entries that closes the loop.",
            context={"cycle": " -> ".join(str(path) for path in self.cycle)},
        )

    def __str__(self) -> str:
        lines = [self.message]
        for position, path in enumerate(self.cycle):
            lines.append(f"  {'-> ' if position else ''}{path}")
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["cycle"] = [str(path) for path in self.cycle]
        return payload


__all__ = [
    "CyclicProjectReferenceError",
    "DescriptorError",
    "DescriptorNotFoundError",
    "ErrorCode",
    "MalformedDescriptorError",
    "MalformedLockfileError",
    "ProjAssetsError",
    "ValidationError",
]
