import pytest

from cp_sync.automations.orders_validation import validate_order
from cp_sync.errors import ImmutableFieldError


@pytest.fixture
def synced(base, make_order):
    cp_order_id = base.cp_orders.add({"Order ID": "O1", "Order Number": 1001, "Customer ID": "C-77"})
    order_id = base.orders.add(make_order(**{"Order Number": "1001"}))
    return order_id, cp_order_id


def test_passes_when_nothing_changed(base, synced):
    order_id, cp_order_id = synced

    result = validate_order(base, order_id)

    assert result["cp_order_record_id"] == cp_order_id
    assert result["unchanged_fields"] == ["Order Number", "Customer ID"]
    assert result["unverifiable_fields"] == ["Product ID", "Variant ID", "Item ID", "Quantity"]
    assert base.cp_orders.updated == []


def test_fails_with_full_report(base, synced):
    order_id, _ = synced
    base.orders.update(order_id, {"Customer ID": "C-99"})

    with pytest.raises(ImmutableFieldError) as exc:
        validate_order(base, order_id)

    report = str(exc.value)
    assert '✗ Customer ID: "C-77" -> "C-99"' in report
    assert "✓ Order Number" in report
    assert "? Quantity" in report


def test_unstored_fields_are_not_compared(base, make_order):
    base.cp_orders.add({"Order ID": "O1"})
    order_id = base.orders.add(make_order())

    result = validate_order(base, order_id)

    assert result["unchanged_fields"] == []
