from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from typegen.codegen.core.config import GeneratorConfig
from typegen.codegen.core.diagnostics import Diagnostics
from typegen.codegen.core.extractor import extract_type_graph
from typegen.codegen.core.schema import TypeGraph


def build_metadata() -> dict[str, Any]:
    """A small sales domain: version base chain, entities, a view and an enum."""
    return {
        "types": [
            {
                "name": "VersionEntityObject",
                "namespace": "Core",
                "kind": "abstract",
                "properties": [
                    {"name": "Id", "type": "long", "is_numeric": True},
                    {
                        "name": "RowVersion",
                        "type": "byte[]",
                        "is_array": True,
                        "element_type": "byte",
                    },
                ],
            },
            {
                "name": "Order",
                "namespace": "Sales",
                "kind": "entity",
                "base": "VersionEntityObject",
                "properties": [
                    {"name": "OrderNumber", "type": "string"},
                    {"name": "OrderDate", "type": "DateTime"},
                    {"name": "ExternalId", "type": "Guid"},
                    {"name": "Status", "type": "OrderStatus", "is_enum": True},
                    {"name": "Total", "type": "decimal", "is_numeric": True},
                    {"name": "Comment", "type": "string", "is_nullable": True},
                    {"name": "CustomerId", "type": "long", "is_numeric": True},
                    {
                        "name": "Customer",
                        "type": "Customer",
                        "is_class": True,
                        "is_navigation": True,
                    },
                    {
                        "name": "Items",
                        "type": "List<OrderItem>",
                        "is_generic_list": True,
                        "generic_arguments": ["OrderItem"],
                    },
                    {
                        "name": "Tags",
                        "type": "Dictionary<string, string>",
                        "is_class": True,
                        "generic_arguments": ["string", "string"],
                    },
                    {"name": "Initial", "type": "char"},
                ],
            },
            {
                "name": "Customer",
                "namespace": "Sales",
                "kind": "entity",
                "base": "VersionEntityObject",
                "properties": [
                    {"name": "Name", "type": "string"},
                    {
                        "name": "Orders",
                        "type": "Order[]",
                        "is_array": True,
                        "element_type": "Order",
                    },
                    {"name": "Address", "type": "IAddress", "is_interface": True},
                ],
            },
            {
                "name": "OrderItem",
                "namespace": "Sales",
                "kind": "entity",
                "base": "EntityObject",
                "properties": [
                    {"name": "Quantity", "type": "int", "is_numeric": True},
                    {"name": "OrderId", "type": "long", "is_numeric": True},
                    {"name": "Price", "type": "decimal?", "is_numeric": True},
                    {
                        "name": "Order",
                        "type": "Order",
                        "is_class": True,
                        "is_navigation": True,
                    },
                ],
            },
            {
                "name": "OrderSummary",
                "namespace": "Sales.Reports",
                "kind": "view",
                "base": "ViewObject",
                "properties": [
                    {"name": "OrderNumber", "type": "string"},
                    {
                        "name": "Statuses",
                        "type": "List<OrderStatus>",
                        "is_generic_list": True,
                        "generic_arguments": ["OrderStatus"],
                    },
                    {
                        "name": "ExternalIds",
                        "type": "List<Guid>",
                        "is_generic_list": True,
                        "generic_arguments": ["Guid"],
                    },
                ],
            },
            {
                "name": "OrderStatus",
                "namespace": "Sales",
                "kind": "enum",
                "members": [
                    {"name": "New", "value": 0},
                    {"name": "Shipped", "value": 1},
                    {"name": "Cancelled", "value": 5},
                ],
            },
        ]
    }


@pytest.fixture
def metadata() -> dict[str, Any]:
    return build_metadata()


@pytest.fixture
def config(tmp_path: Path) -> GeneratorConfig:
    """Default configuration writing below the pytest tmp_path."""
    return GeneratorConfig(output_path=tmp_path / "out")


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()


@pytest.fixture
def graph(metadata, config, diagnostics) -> TypeGraph:
    return extract_type_graph(metadata, config, diagnostics=diagnostics)
