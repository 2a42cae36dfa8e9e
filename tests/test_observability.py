import io
import json
from pathlib import Path

from projassets.observability import DiagnosticsLog


def test_log_once_dedups_by_message() -> None:
    diagnostics = DiagnosticsLog()

    assert diagnostics.log_once(operation="closure", message="Couldn't find A/1.0.0")
    assert not diagnostics.log_once(operation="compile_files", message="Couldn't find A/1.0.0")
    diagnostics.log(operation="resolve_project", message="Project App")
    diagnostics.log(operation="resolve_project", message="Project App")

    assert diagnostics.messages() == [
        "Couldn't find A/1.0.0",
        "Project App",
        "Project App",
    ]
    assert diagnostics.records[0]["level"] == "warning"
    assert diagnostics.messages(level="info") == ["Project App", "Project App"]


def test_records_are_filtered_by_project_and_echoed_to_stream() -> None:
    stream = io.StringIO()
    diagnostics = DiagnosticsLog(stream=stream)

    diagnostics.log(
        operation="read_lockfile", message="No assets file", project=Path("/p/A.fsproj")
    )
    diagnostics.log(operation="read_lockfile", message="Other", project="/p/B.fsproj")

    assert [r["message"] for r in diagnostics.records_for_project("/p/A.fsproj")] == [
        "No assets file"
    ]
    assert stream.getvalue() == "No assets file\nOther\n"


def test_records_export_as_json_lines(tmp_path: Path) -> None:
    diagnostics = DiagnosticsLog()
    diagnostics.log(
        operation="resolve_project",
        message="Project App",
        project="/p/App.fsproj",
        extra={"sources": ["/p/Program.fs"]},
    )

    output = diagnostics.to_json_lines(tmp_path / "logs" / "diagnostics.jsonl")

    lines = output.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0]) == {
        "extra": {"sources": ["/p/Program.fs"]},
        "level": "info",
        "message": "Project App",
        "operation": "resolve_project",
        "project": "/p/App.fsproj",
    }
