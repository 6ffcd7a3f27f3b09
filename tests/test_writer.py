"""Tests for writing artifacts and cleaning output trees."""

from __future__ import annotations

from pathlib import Path

from typegen.codegen.core.artifact import GeneratedArtifact, ItemType, UnitType
from typegen.codegen.core.config import GeneratorConfig
from typegen.codegen.core.writer import ArtifactWriter


def _artifact(sub_file_path: str, *lines: str) -> GeneratedArtifact:
    artifact = GeneratedArtifact(UnitType.ANGULAR_APP, ItemType.TYPESCRIPT_ENUM, "E", sub_file_path, ".ts")
    artifact.extend(lines)
    return artifact


def test_write_prepends_generated_label(tmp_path: Path) -> None:
    config = GeneratorConfig(output_path=tmp_path)
    paths = ArtifactWriter(config).write([_artifact("src/app/enums/e.ts", "export enum E {", "}")])

    assert paths == [tmp_path / "angular" / "src/app/enums/e.ts"]
    assert paths[0].read_text(encoding="utf-8") == "//@GeneratedCode\nexport enum E {\n}\n"


def test_write_without_header_and_with_formatter(tmp_path: Path) -> None:
    config = GeneratorConfig(
        output_path=tmp_path,
        write_info_header=False,
        formatter=lambda lines: [line.upper() for line in lines],
        unit_folders={"AngularApp": "client"},
    )
    writer = ArtifactWriter(config)
    [path] = writer.write([_artifact("e.ts", "export enum E {", "}")])

    assert path == tmp_path / "client" / "e.ts"
    assert path.read_text(encoding="utf-8") == "EXPORT ENUM E {\n}\n"
    assert not writer.is_generated_file(path)


def test_delete_generated_files_keeps_hand_written_ones(tmp_path: Path) -> None:
    config = GeneratorConfig(output_path=tmp_path)
    writer = ArtifactWriter(config)
    root = config.project_path("AngularApp")
    writer.write([_artifact("gen/a.ts", "a"), _artifact("gen/deep/b.ts", "b")])

    manual = root / "gen" / "manual.ts"
    manual.write_text("export const x = 1;\n", encoding="utf-8")
    sidecar = root / "gen" / "a.custom"
    sidecar.write_text("//@GeneratedCode\n", encoding="utf-8")

    deleted = writer.delete_generated_files(root)
    assert deleted == [root / "gen" / "a.ts", root / "gen" / "deep" / "b.ts"]
    assert manual.exists()
    assert sidecar.exists()

    removed = writer.clean_directories(root)
    assert removed == [root / "gen" / "deep"]
    assert (root / "gen").exists()
