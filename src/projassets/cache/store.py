"""In-memory resolution cache with modification-time staleness checks."""

from __future__ import annotations

import threading
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from projassets.descriptor import normalize_path
from projassets.graph import ProjectGraphWalker
from projassets.models import ResolvedProjectOptions
from projassets.observability import DiagnosticsLog


class ResolutionCache:
    """Resolved project options keyed by normalized descriptor path.

    An entry is recomputed, and replaced as a whole, when the descriptor on
    disk is newer than the entry's ``load_time``. Lookups and the
    compute-then-store sequence run under a single lock.
    """

    def __init__(
        self,
        walker: ProjectGraphWalker | None = None,
        *,
        diagnostics: DiagnosticsLog | None = None,
    ) -> None:
        if walker is None:
            walker = ProjectGraphWalker(diagnostics=diagnostics)
        self.walker = walker
        self.diagnostics = diagnostics if diagnostics is not None else walker.diagnostics
        self._entries: dict[Path, ResolvedProjectOptions] = {}
        self._lock = threading.Lock()

    def get(self, path: str | Path) -> ResolvedProjectOptions:
        key = normalize_path(path)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.diagnostics.log(
                    operation="cache_get",
                    message=f"{key.name} is not in the cache",
                    project=key,
                    level="debug",
                )
            elif entry.load_time < _modified(key):
                self.diagnostics.log(
                    operation="cache_get",
                    message=f"{key.name} has been modified",
                    project=key,
                    level="debug",
                )
            else:
                return entry
            entry = self.walker.resolve_project(key)
            self._entries[key] = entry
            return entry

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def invalidate_project_file(self, changed: str | Path) -> None:
        """React to a change in *changed* (a path or ``file://`` URI).

        Every entry is dropped, not only the projects that include *changed*.
        """
        changed_path = _as_path(changed)
        self.diagnostics.log(
            operation="cache_invalidate",
            message=f"Invalidating all cached projects after change to {changed_path}",
            level="debug",
        )
        self.invalidate_all()

    def open_projects(self) -> list[ResolvedProjectOptions]:
        with self._lock:
            return list(self._entries.values())

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock:
            return normalize_path(path) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _modified(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except FileNotFoundError:
        # A deleted descriptor keeps serving its last resolution.
        return 0


def _as_path(changed: str | Path) -> Path:
    if isinstance(changed, str) and changed.startswith("file:"):
        parsed = urlparse(changed)
        return normalize_path(url2pathname(parsed.path))
    return normalize_path(changed)
