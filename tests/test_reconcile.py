import logging

from cp_sync import fields as f
from cp_sync.reconcile import (
    CREATE,
    UPDATE,
    build_order_item_fields,
    find_immutable_changes,
    items_to_create,
    plan_cp_order_write,
)


def test_items_to_create_tops_up_missing_rows():
    assert items_to_create(3, 1) == 2
    assert items_to_create(2, 0) == 2
    assert items_to_create(1, 1) == 0


def test_items_to_create_never_goes_negative(caplog):
    with caplog.at_level(logging.WARNING):
        assert items_to_create(1, 3, "I1") == 0
    assert "More records exist (3) than expected quantity (1)" in caplog.text


def test_plan_create_uses_full_field_set(make_order):
    plan = plan_cp_order_write(make_order(), None, "recCustomer0001")

    assert plan.action == CREATE
    assert plan.record_id is None
    assert plan.fields["Order ID"] == "O1"
    assert plan.fields["Order Number"] == "#1001"
    assert plan.fields["Customers"] == ["recCustomer0001"]
    assert set(plan.fields) == set(f.CP_ORDER_CREATE_FIELDS) | {"Customers"}


def test_plan_update_skips_create_only_fields(make_order):
    plan = plan_cp_order_write(make_order(), {"id": "recCp", "fields": {}})

    assert plan.action == UPDATE
    assert plan.record_id == "recCp"
    assert "Order ID" not in plan.fields
    assert "Order Number" not in plan.fields
    assert "Created At" not in plan.fields
    assert "Customers" not in plan.fields
    assert plan.fields["Shipping City"] == "Montreal"
    assert plan.fields["Tags"] is None


def test_build_order_item_fields_links_only_found_records(make_order):
    item = build_order_item_fields(make_order(), "recCp", variant_record_id="recV", price_at_time=200.0)

    assert item["CP Orders"] == ["recCp"]
    assert item["Variants"] == ["recV"]
    assert "Products" not in item
    assert item["Item ID"] == "I1"
    assert item["Price At Time"] == 200.0


def test_find_immutable_changes_is_string_normalized():
    stored = {"Order Number": "1001", "Customer ID": "C-1", "Product ID": None}
    current = {"Order Number": 1001.0, "Customer ID": "C-2", "Product ID": "P9"}

    changes = find_immutable_changes(stored, current, ["Order Number", "Customer ID", "Product ID"])

    assert [c.field for c in changes] == ["Customer ID"]
    assert str(changes[0]) == 'Customer ID: "C-1" -> "C-2"'


def test_find_immutable_changes_detects_cleared_value():
    changes = find_immutable_changes({"Order Number": "#1"}, {}, ["Order Number"])
    assert len(changes) == 1
    assert changes[0].current is None
