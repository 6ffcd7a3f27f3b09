"""Tests for import resolution and insertion."""

from __future__ import annotations

from typegen.codegen.core.extractor import extract_type_graph
from typegen.codegen.core.imports import (
    ImportCategory,
    ImportResolver,
    create_import,
    distinct,
    insert_imports,
)


def test_create_import_statement() -> None:
    assert (
        create_import("@app-models", "OrderItem", "sales")
        == "import { OrderItem } from '@app-models/sales/order-item';"
    )
    assert (
        create_import("@app-models", "VersionModel", "")
        == "import { VersionModel } from '@app-models/version-model';"
    )


def test_insert_imports_keeps_first_seen_order() -> None:
    lines = ["export interface A {", "}"]
    result = insert_imports(["import B;", "import A;", "import B;"], lines)
    assert result is lines
    assert lines == ["import B;", "import A;", "export interface A {", "}"]


def test_distinct() -> None:
    assert distinct(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_resolver_collects_enum_and_model_references(graph, config) -> None:
    resolver = ImportResolver(graph, config)
    found = resolver.resolve(graph.get("Order"))
    assert [(i.category, i.name) for i in found] == [
        (ImportCategory.ENUM, "OrderStatus"),
        (ImportCategory.MODEL, "Customer"),
        (ImportCategory.MODEL, "OrderItem"),
    ]
    assert resolver.statements(graph.get("Order")) == [
        "import { OrderStatus } from '@app-enums/sales/order-status';",
        "import { Customer } from '@app-models/sales/customer';",
        "import { OrderItem } from '@app-models/sales/order-item';",
    ]


def test_resolver_handles_collections_of_enums(graph, config) -> None:
    statements = ImportResolver(graph, config).statements(graph.get("OrderSummary"))
    assert statements == ["import { OrderStatus } from '@app-enums/sales/order-status';"]


def test_resolver_skips_external_and_interface_references(graph, config) -> None:
    statements = ImportResolver(graph, config).statements(graph.get("Customer"))
    assert statements == ["import { Order } from '@app-models/sales/order';"]


def test_resolver_skips_self_references_and_deduplicates() -> None:
    data = {
        "types": [
            {
                "name": "Node",
                "namespace": "Tree",
                "kind": "entity",
                "properties": [
                    {"name": "Parent", "type": "Node", "is_class": True},
                    {"name": "Leaf", "type": "Leaf", "is_class": True},
                    {"name": "Leaves", "type": "Leaf[]", "is_array": True, "element_type": "Leaf"},
                ],
            },
            {"name": "Leaf", "namespace": "Tree", "kind": "entity", "properties": []},
        ]
    }
    graph = extract_type_graph(data)
    statements = ImportResolver(graph).statements(graph.get("Node"))
    assert statements == ["import { Leaf } from '@app-models/tree/leaf';"]
