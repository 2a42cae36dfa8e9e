"""Structured diagnostics collection for soft resolution inconsistencies."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, TextIO

Level = Literal["debug", "info", "warning"]


@dataclass(slots=True)
class DiagnosticsLog:
    """Append-only record sink.

    ``log_once`` drops any message whose text was already recorded through it,
    so repeated inconsistencies across projects surface a single time.
    """

    stream: TextIO | None = None
    records: list[dict[str, Any]] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def log(
        self,
        *,
        operation: str,
        message: str,
        project: str | Path | None = None,
        level: Level = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "project": str(project) if project is not None else None,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        with self._lock:
            self.records.append(record)
        if self.stream is not None:
            print(message, file=self.stream)

    def log_once(
        self,
        *,
        operation: str,
        message: str,
        project: str | Path | None = None,
        level: Level = "warning",
    ) -> bool:
        """Record *message* unless it was seen before; return whether it was recorded."""
        with self._lock:
            if message in self._seen:
                return False
            self._seen.add(message)
        self.log(operation=operation, message=message, project=project, level=level)
        return True

    def messages(self, *, level: Level | None = None) -> list[str]:
        return [
            record["message"]
            for record in self.records
            if level is None or record["level"] == level
        ]

    def records_for_project(self, project: str | Path) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("project") == str(project)]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
