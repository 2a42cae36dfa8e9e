from pathlib import Path

import pytest

from builders import descriptor_xml
from projassets.descriptor import read_descriptor
from projassets.errors import DescriptorNotFoundError, MalformedDescriptorError


def test_descriptor_sources_and_references_are_absolute_and_ordered(tmp_path: Path) -> None:
    project_file = tmp_path / "src" / "App" / "App.fsproj"
    project_file.parent.mkdir(parents=True)
    project_file.write_text(
        descriptor_xml(
            sources=["Types.fs", "Sub/Parser.fs", "Program.fs"],
            references=["../Lib/Lib.fsproj"],
        ),
        encoding="utf-8",
    )

    descriptor = read_descriptor(project_file)

    app_dir = tmp_path / "src" / "App"
    assert descriptor.path == project_file
    assert descriptor.source_files == (
        app_dir / "Types.fs",
        app_dir / "Sub" / "Parser.fs",
        app_dir / "Program.fs",
    )
    assert descriptor.project_references == (tmp_path / "src" / "Lib" / "Lib.fsproj",)


def test_descriptor_backslash_paths_use_host_separator(tmp_path: Path) -> None:
    project_file = tmp_path / "App" / "App.fsproj"
    project_file.parent.mkdir()
    project_file.write_text(
        descriptor_xml(sources=["Sub\\Parser.fs"], references=["..\\Lib\\Lib.fsproj"]),
        encoding="utf-8",
    )

    descriptor = read_descriptor(project_file)

    assert descriptor.source_files == (tmp_path / "App" / "Sub" / "Parser.fs",)
    assert descriptor.project_references == (tmp_path / "Lib" / "Lib.fsproj",)


def test_descriptor_with_msbuild_namespace_is_read(tmp_path: Path) -> None:
    project_file = tmp_path / "Legacy.fsproj"
    project_file.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<Project ToolsVersion="15.0" '
        'xmlns="http://schemas.microsoft.com/developer/msbuild/2003">\n'
        "  <!-- sources -->\n"
        "  <ItemGroup>\n"
        '    <Compile Include="Main.fs" />\n'
        "    <Compile />\n"
        "  </ItemGroup>\n"
        "</Project>\n",
        encoding="utf-8",
    )

    descriptor = read_descriptor(project_file)

    assert descriptor.source_files == (tmp_path / "Main.fs",)
    assert descriptor.project_references == ()


def test_malformed_descriptor_is_rejected(tmp_path: Path) -> None:
    project_file = tmp_path / "Broken.fsproj"
    project_file.write_text("<Project><ItemGroup></Project>", encoding="utf-8")

    with pytest.raises(MalformedDescriptorError) as excinfo:
        read_descriptor(project_file)

    assert excinfo.value.code == "E_DESCRIPTOR"
    assert excinfo.value.context["path"] == str(project_file)


def test_missing_descriptor_is_reported(tmp_path: Path) -> None:
    with pytest.raises(DescriptorNotFoundError):
        read_descriptor(tmp_path / "Nope.fsproj")
