"""Tests for custom region extraction, merging and externalizing."""

from __future__ import annotations

from pathlib import Path

import pytest

from typegen.codegen.core.artifact import GeneratedArtifact, ItemType, RegionState, UnitType
from typegen.codegen.core.config import GeneratorConfig
from typegen.codegen.core.diagnostics import Diagnostics
from typegen.codegen.core.regions import CustomRegionEngine, RegionKind, read_and_delete

PRIOR_FILE = """//@GeneratedCode
import { B } from 'b';
//@CustomImportBegin
import { X } from 'x';

import { B } from 'b';
//@CustomImportEnd
class A {
  old: string;
//@CustomCodeBegin
  doSomethingCustom();
//@CustomCodeEnd
}
"""


@pytest.fixture
def engine(tmp_path: Path) -> CustomRegionEngine:
    return CustomRegionEngine(GeneratorConfig(output_path=tmp_path), Diagnostics())


def _artifact(sub_file_path: str = "src/a.ts") -> GeneratedArtifact:
    artifact = GeneratedArtifact(
        UnitType.ANGULAR_APP, ItemType.TYPESCRIPT_MODEL, "A", sub_file_path, ".ts"
    )
    artifact.extend(["class A {", "  fresh: number;", "}"])
    artifact.imports.extend(["import { B } from 'b';", "import { A2 } from 'a2';", "import { B } from 'b';"])
    return artifact


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_regions_drops_blank_lines(engine) -> None:
    regions = engine.parse_regions(PRIOR_FILE.splitlines())
    assert regions[RegionKind.IMPORT].lines == ("import { X } from 'x';", "import { B } from 'b';")
    assert regions[RegionKind.CODE].lines == ("  doSomethingCustom();",)


def test_first_labelled_pair_wins(engine) -> None:
    lines = [
        "//@CustomCodeBegin",
        "first();",
        "//@CustomCodeEnd",
        "//@CustomCodeBegin",
        "second();",
        "//@CustomCodeEnd",
    ]
    assert engine.parse_regions(lines)[RegionKind.CODE].lines == ("first();",)


def test_labels_match_on_stripped_lines(engine) -> None:
    lines = ["    //@CustomCodeBegin  ", "x();", "\t//@CustomCodeEnd"]
    assert engine.parse_regions(lines)[RegionKind.CODE].lines == ("x();",)


def test_unterminated_region_is_ignored_with_warning(engine) -> None:
    regions = engine.parse_regions(["//@CustomCodeBegin", "lost();"], "a.ts")
    assert RegionKind.CODE not in regions
    assert len(engine.diagnostics.for_source("a.ts")) == 1


def test_extract_states(engine, tmp_path: Path) -> None:
    missing = tmp_path / "missing.ts"
    assert engine.extract(missing) == (RegionState.NO_PRIOR_FILE, {})

    plain = _write(tmp_path / "plain.ts", "class A {\n}\n")
    state, regions = engine.extract(plain)
    assert state == RegionState.PRIOR_FILE_FOUND
    assert regions == {}

    full = _write(tmp_path / "full.ts", PRIOR_FILE)
    state, regions = engine.extract(full)
    assert state == RegionState.REGIONS_EXTRACTED
    assert set(regions) == {RegionKind.IMPORT, RegionKind.CODE}


def test_extract_falls_back_to_sidecar(engine, tmp_path: Path) -> None:
    _write(tmp_path / "a.custom", "//@CustomCodeBegin\nfromSidecar();\n//@CustomCodeEnd\n")
    state, regions = engine.extract(tmp_path / "a.ts")
    assert state == RegionState.REGIONS_EXTRACTED
    assert regions[RegionKind.CODE].lines == ("fromSidecar();",)


def test_extract_treats_unreadable_file_as_missing(engine, tmp_path: Path) -> None:
    path = tmp_path / "binary.ts"
    path.write_bytes(b"\xff\xfe\x00invalid")
    assert engine.extract(path)[0] == RegionState.NO_PRIOR_FILE


def test_custom_file_path(engine, tmp_path: Path) -> None:
    assert engine.custom_file_path(tmp_path / "dir" / "order.ts") == tmp_path / "dir" / "order.custom"
    assert engine.is_customizable_file("Order.CS")
    assert not engine.is_customizable_file("order.json")


def test_merge_without_prior_file_writes_empty_labels(engine, tmp_path: Path) -> None:
    artifact = engine.merge(_artifact(), tmp_path)
    assert artifact.source == [
        "import { B } from 'b';",
        "import { A2 } from 'a2';",
        "//@CustomImportBegin",
        "//@CustomImportEnd",
        "class A {",
        "  fresh: number;",
        "//@CustomCodeBegin",
        "//@CustomCodeEnd",
        "}",
    ]
    assert artifact.region_state == RegionState.NO_PRIOR_FILE


def test_merge_splices_prior_regions(engine, tmp_path: Path) -> None:
    _write(tmp_path / "src" / "a.ts", PRIOR_FILE)
    artifact = engine.merge(_artifact(), tmp_path)
    assert artifact.source == [
        "import { B } from 'b';",
        "import { A2 } from 'a2';",
        "//@CustomImportBegin",
        "import { X } from 'x';",
        "//@CustomImportEnd",
        "class A {",
        "  fresh: number;",
        "//@CustomCodeBegin",
        "  doSomethingCustom();",
        "//@CustomCodeEnd",
        "}",
    ]
    assert artifact.region_state == RegionState.MERGED


def test_merge_is_stable_across_runs(engine, tmp_path: Path) -> None:
    path = tmp_path / "src" / "a.ts"
    _write(path, PRIOR_FILE)
    first = engine.merge(_artifact(), tmp_path)
    _write(path, first.text)
    second = engine.merge(_artifact(), tmp_path)
    assert second.source == first.source


def test_merge_without_region_support_only_inserts_imports(engine, tmp_path: Path) -> None:
    _write(tmp_path / "src" / "a.ts", PRIOR_FILE)
    artifact = _artifact()
    artifact.supports_custom_regions = False
    engine.merge(artifact, tmp_path)
    assert artifact.source == [
        "import { B } from 'b';",
        "import { A2 } from 'a2';",
        "class A {",
        "  fresh: number;",
        "}",
    ]
    assert artifact.region_state is None


def test_merge_without_import_support_warns_about_dropped_imports(engine, tmp_path: Path) -> None:
    _write(tmp_path / "src" / "a.ts", PRIOR_FILE)
    artifact = _artifact()
    artifact.supports_custom_imports = False
    engine.merge(artifact, tmp_path)
    assert "//@CustomImportBegin" not in artifact.source
    assert "  doSomethingCustom();" in artifact.source
    assert len(engine.diagnostics.for_source("src/a.ts")) == 1


def test_save_custom_parts_writes_sidecar(engine, tmp_path: Path) -> None:
    path = _write(tmp_path / "a.ts", PRIOR_FILE)
    sidecar = engine.save_custom_parts(path)
    assert sidecar == tmp_path / "a.custom"
    assert sidecar.read_text(encoding="utf-8").splitlines() == [
        "//@CustomImportBegin",
        "import { X } from 'x';",
        "import { B } from 'b';",
        "//@CustomImportEnd",
        "//@CustomCodeBegin",
        "  doSomethingCustom();",
        "//@CustomCodeEnd",
    ]


def test_save_custom_parts_removes_stale_sidecar(engine, tmp_path: Path) -> None:
    path = _write(tmp_path / "a.ts", "//@CustomCodeBegin\n//@CustomCodeEnd\n")
    stale = _write(tmp_path / "a.custom", "old\n")
    assert engine.save_custom_parts(path) is None
    assert not stale.exists()


def test_save_all_custom_parts(engine, tmp_path: Path) -> None:
    _write(tmp_path / "one" / "a.ts", PRIOR_FILE)
    _write(tmp_path / "two" / "b.cs", "//@CustomCodeBegin\nKeep();\n//@CustomCodeEnd\n")
    _write(tmp_path / "two" / "notes.txt", PRIOR_FILE)
    saved = engine.save_all_custom_parts(tmp_path)
    assert saved == [tmp_path / "one" / "a.custom", tmp_path / "two" / "b.custom"]


def test_read_and_delete(tmp_path: Path) -> None:
    path = _write(tmp_path / "a.custom", "x\ny\n")
    assert read_and_delete(path) == ["x", "y"]
    assert not path.exists()
    assert read_and_delete(path) == []


def test_save_all_custom_parts_skips_undecodable_files(engine, tmp_path: Path) -> None:
    broken = tmp_path / "one" / "legacy.ts"
    broken.parent.mkdir(parents=True)
    broken.write_bytes(b"//@CustomCodeBegin\n\xff\xfe legacy\n//@CustomCodeEnd\n")
    _write(tmp_path / "two" / "b.cs", "//@CustomCodeBegin\nKeep();\n//@CustomCodeEnd\n")

    saved = engine.save_all_custom_parts(tmp_path)
    assert saved == [tmp_path / "two" / "b.custom"]
    assert len(engine.diagnostics.for_source(str(broken))) == 1
    assert broken.exists()
