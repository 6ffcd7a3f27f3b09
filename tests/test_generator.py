"""End-to-end tests for generation runs: ordering, idempotence, regions and collisions."""

from __future__ import annotations

from pathlib import Path

import pytest

from typegen.codegen import generate_from_metadata
from typegen.codegen.core.artifact import ItemType
from typegen.codegen.core.config import GeneratorConfig
from typegen.codegen.core.diagnostics import Diagnostics
from typegen.codegen.core.extractor import TypeGraphExtractor, extract_type_graph
from typegen.codegen.core.generator import (
    GenerationHooks,
    GenerationResult,
    PathCollisionError,
    generate_code,
)
from typegen.codegen.core.writer import ArtifactWriter
from typegen.codegen.languages.csharp import CSharpGenerator
from typegen.codegen.languages.typescript import TypeScriptGenerator


def _run(metadata, config: GeneratorConfig, **kwargs) -> GenerationResult:
    result = generate_from_metadata(metadata, ["csharp", "typescript"], config, **kwargs)
    assert result.success, result.error_message
    return result


def _texts(config: GeneratorConfig) -> dict[str, str]:
    root = Path(config.output_path)
    return {
        str(path.relative_to(root)): path.read_text(encoding="utf-8")
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_run_produces_every_artifact_in_plan_order(metadata, config) -> None:
    result = _run(metadata, config)
    assert [a.sub_file_path for a in result.artifacts] == [
        "Models/Sales/Order.cs",
        "Models/Sales/Customer.cs",
        "Models/Sales/OrderItem.cs",
        "Models/Sales/Reports/OrderSummary.cs",
        "Models/Sales/OrderInheritance.cs",
        "Models/Sales/CustomerInheritance.cs",
        "Models/Sales/OrderItemInheritance.cs",
        "Models/Sales/Reports/OrderSummaryInheritance.cs",
        "src/app/enums/sales/order-status.ts",
        "src/app/models/sales/order.ts",
        "src/app/models/sales/customer.ts",
        "src/app/models/sales/order-item.ts",
        "src/app/models/sales/reports/order-summary.ts",
        "src/app/services/http/sales/order-service.ts",
        "src/app/services/http/sales/customer-service.ts",
        "src/app/services/http/sales/order-item-service.ts",
        "src/app/services/http/sales/reports/order-summary-service.ts",
    ]
    assert result.metadata["targets"] == ["csharp", "typescript"]
    assert result.metadata["artifact_count"] == 17
    assert result.metadata["type_count"] == 5
    assert len(result.by_item_type(ItemType.TYPESCRIPT_SERVICE)) == 4
    assert result.find("src/app/models/sales/order.ts").full_name == "src.app.models.sales.Order"


def test_run_warnings_collect_anomalies_once(metadata, config) -> None:
    result = _run(metadata, config)
    tags = [w for w in result.warnings if w.startswith("Order.Tags:")]
    initial = [w for w in result.warnings if w.startswith("Order.Initial:")]
    assert len(tags) == 1
    assert len(initial) == 1
    assert any("Customer.Address references IAddress" in w for w in result.warnings)


def test_parallel_run_matches_sequential_order(metadata, tmp_path: Path) -> None:
    sequential = _run(metadata, GeneratorConfig(output_path=tmp_path / "a", max_workers=1))
    parallel = _run(metadata, GeneratorConfig(output_path=tmp_path / "b", max_workers=4))
    assert [a.sub_file_path for a in parallel.artifacts] == [
        a.sub_file_path for a in sequential.artifacts
    ]
    assert [a.text for a in parallel.artifacts] == [a.text for a in sequential.artifacts]
    assert parallel.metadata["workers"] == 4


def test_regeneration_is_idempotent(metadata, config) -> None:
    writer = ArtifactWriter(config)
    writer.write(_run(metadata, config).artifacts)
    first = _texts(config)

    writer.write(_run(metadata, config).artifacts)
    assert _texts(config) == first
    assert all(text.startswith("//@GeneratedCode\n") for text in first.values())


def test_custom_code_survives_model_change(metadata, config) -> None:
    writer = ArtifactWriter(config)
    writer.write(_run(metadata, config).artifacts)

    path = config.project_path("AngularApp") / "src/app/models/sales/order.ts"
    text = path.read_text(encoding="utf-8")
    text = text.replace(
        "//@CustomImportBegin\n",
        "//@CustomImportBegin\nimport { Helper } from '@app-shared/helper';\n",
    ).replace(
        "//@CustomCodeBegin\n",
        "//@CustomCodeBegin\n  doSomethingCustom();\n  doSomethingElse();\n",
    )
    path.write_text(text, encoding="utf-8")

    order = next(t for t in metadata["types"] if t["name"] == "Order")
    order["properties"].append({"name": "Discount", "type": "decimal", "is_numeric": True})

    result = _run(metadata, config)
    source = result.find("src/app/models/sales/order.ts").source
    assert "  discount: number;" in source
    end = source.index("//@CustomCodeEnd")
    assert source[end - 3:end + 2] == [
        "//@CustomCodeBegin",
        "  doSomethingCustom();",
        "  doSomethingElse();",
        "//@CustomCodeEnd",
        "}",
    ]
    begin = source.index("//@CustomImportBegin")
    assert source[begin:begin + 3] == [
        "//@CustomImportBegin",
        "import { Helper } from '@app-shared/helper';",
        "//@CustomImportEnd",
    ]


def test_custom_code_survives_in_csharp_model(metadata, config) -> None:
    writer = ArtifactWriter(config)
    writer.write(_run(metadata, config).artifacts)

    path = config.project_path("WebApi") / "Models/Sales/Customer.cs"
    text = path.read_text(encoding="utf-8").replace(
        "//@CustomCodeBegin\n", "//@CustomCodeBegin\npublic string Display => Name;\n"
    )
    path.write_text(text, encoding="utf-8")

    writer.write(_run(metadata, config).artifacts)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines.count("public string Display => Name;") == 1
    assert lines[-4:] == ["public string Display => Name;", "//@CustomCodeEnd", "}", "}"]


def test_sidecar_restores_regions_after_clean(metadata, config) -> None:
    writer = ArtifactWriter(config)
    writer.write(_run(metadata, config).artifacts)

    project = config.project_path("AngularApp")
    path = project / "src/app/services/http/sales/order-service.ts"
    path.write_text(
        path.read_text(encoding="utf-8").replace(
            "//@CustomCodeBegin\n", "//@CustomCodeBegin\n  ping() {}\n"
        ),
        encoding="utf-8",
    )

    engine = TypeScriptGenerator(config).regions
    assert engine.save_all_custom_parts(project) == [path.with_name("order-service.custom")]
    writer.delete_generated_files(project)
    assert not path.exists()

    result = _run(metadata, config)
    assert "  ping() {}" in result.find("src/app/services/http/sales/order-service.ts").source


def test_path_collision_aborts_the_run(tmp_path: Path) -> None:
    data = {
        "types": [
            {"name": "Order", "namespace": "Sales", "kind": "entity", "properties": [{"name": "A", "type": "int"}]},
            {"name": "Order", "namespace": "sales", "kind": "entity", "properties": [{"name": "B", "type": "int"}]},
        ]
    }
    config = GeneratorConfig(output_path=tmp_path)
    graph = extract_type_graph(data, config)
    assert len(graph) == 2

    with pytest.raises(PathCollisionError) as excinfo:
        generate_code(TypeScriptGenerator(config), graph)
    assert excinfo.value.path == config.project_path("AngularApp") / "src/app/models/sales/order.ts"


def test_generation_failure_becomes_error_result(graph, config) -> None:
    hooks = GenerationHooks()

    def explode(artifact, descriptor):
        raise RuntimeError("hook failed")

    hooks.on_finish(explode)
    result = generate_code(CSharpGenerator(config, hooks=hooks), graph)
    assert not result.success
    assert "hook failed" in result.error_message
    assert isinstance(result.exception, RuntimeError)
    assert result.artifacts == []


def test_shared_diagnostics_are_reported_once(graph, config) -> None:
    diagnostics = Diagnostics()
    generators = [
        CSharpGenerator(config, diagnostics=diagnostics),
        TypeScriptGenerator(config, diagnostics=diagnostics),
    ]
    result = generate_code(generators, graph)
    initial = [w for w in result.warnings if w.startswith("Order.Initial:")]
    assert len(initial) == 1
    assert len(result.warnings) == len(set(result.warnings))


def test_empty_generator_list() -> None:
    result = generate_code([], extract_type_graph({"types": []}))
    assert result.success
    assert result.artifacts == []


def test_settings_entries_accepted_as_plain_dicts(metadata, config) -> None:
    result = generate_from_metadata(
        metadata,
        ["ts"],
        config,
        settings=[
            {"unit": "AngularApp", "item": "TypeScriptModel", "key": "Generate", "value": "false"},
            {"unit": "AngularApp", "item": "TypeScriptService", "key": "Generate", "value": "false"},
        ],
    )
    assert [a.sub_file_path for a in result.artifacts] == ["src/app/enums/sales/order-status.ts"]


def test_empty_shared_sink_is_used_by_every_component(config) -> None:
    diagnostics = Diagnostics()
    assert TypeGraphExtractor(config, diagnostics).diagnostics is diagnostics
    generator = TypeScriptGenerator(config, diagnostics=diagnostics)
    assert generator.diagnostics is diagnostics
    assert generator.regions.diagnostics is diagnostics
