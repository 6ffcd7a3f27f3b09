"""Tests for naming and path conventions."""

from __future__ import annotations

import pytest

from typegen.codegen.core.naming import (
    NamingCase,
    convert_case,
    convert_file_item,
    create_sub_path,
    join_path,
    lower_first,
    pluralize,
    strip_interface_prefix,
    to_module_identifier,
    to_pascal_case,
    to_snake_case,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("CustomerOrderItem", "customer-order-item"),
        ("Order", "order"),
        ("OrderService", "order-service"),
        ("Sales\\OrderItem", "sales/order-item"),
        ("Sales/Reports", "sales/reports"),
        ("ApiEntityBase", "api-entity-base"),
        ("", ""),
    ],
)
def test_convert_file_item(name, expected) -> None:
    assert convert_file_item(name) == expected


def test_convert_file_item_is_deterministic() -> None:
    assert convert_file_item("CustomerOrderItem") == convert_file_item("CustomerOrderItem")


def test_create_sub_path() -> None:
    assert create_sub_path("Sales") == "sales"
    assert create_sub_path("Sales.Reports") == "sales/reports"
    assert create_sub_path("BackOffice.Sales") == "back-office/sales"
    assert create_sub_path("") == ""


def test_join_path_skips_empty_parts() -> None:
    assert join_path("src/app", "", "models/", "order.ts") == "src/app/models/order.ts"
    assert join_path("@app-models", "", "version-model") == "@app-models/version-model"


def test_to_module_identifier() -> None:
    assert to_module_identifier("App", "Models", "Sales.Reports") == "App.Models.Sales.Reports"
    assert to_module_identifier("App", "", "Sales") == "App.Sales"
    assert to_module_identifier("src/app", "models", "sales", "Order") == "src.app.models.sales.Order"
    assert to_module_identifier("App", "Models", lower=True) == "app.models"


def test_case_conversions() -> None:
    assert convert_case("OrderItem", NamingCase.CAMEL_CASE) == "orderItem"
    assert convert_case("OrderID", NamingCase.CAMEL_CASE) == "orderID"
    assert convert_case("externalRef", NamingCase.PASCAL_CASE) == "ExternalRef"
    assert convert_case("externalRef", NamingCase.ORIGINAL) == "externalRef"
    assert NamingCase("pascal") is NamingCase.PASCAL_CASE
    assert lower_first("RowVersion") == "rowVersion"
    assert lower_first("") == ""
    assert to_snake_case("OrderItem") == "order_item"
    assert to_pascal_case("order_item") == "OrderItem"


def test_pluralize() -> None:
    assert pluralize("Order") == "Orders"
    assert pluralize("category") == "categories"
    assert pluralize("") == ""


def test_strip_interface_prefix() -> None:
    assert strip_interface_prefix("IAddress") == "Address"
    assert strip_interface_prefix("Invoice") == "Invoice"
    assert strip_interface_prefix("I") == "I"
