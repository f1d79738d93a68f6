import pytest

from cp_sync.automations.orders_update import update_order
from cp_sync.errors import ImmutableFieldError, RecordNotFound


@pytest.fixture
def synced(base, catalog, make_order):
    cp_order_id = base.cp_orders.add({
        "Order ID": "O1",
        "Order Number": "#1001",
        "Customer ID": "C-77",
        "Shipping City": "Montreal",
    })
    order_id = base.orders.add(make_order(**{"Shipping City": "Quebec", "Order Payment Status": "REFUNDED"}))
    return order_id, cp_order_id


def test_updates_mutable_fields(base, catalog, synced):
    order_id, cp_order_id = synced

    result = update_order(base, order_id)

    assert result["cp_order_record_id"] == cp_order_id
    cp_fields = base.cp_orders.get(cp_order_id)["fields"]
    assert cp_fields["Shipping City"] == "Quebec"
    assert cp_fields["Order Payment Status"] == "REFUNDED"
    assert cp_fields["Customers"] == [catalog["customer"]]
    assert base.cp_order_items.created == []


def test_changed_order_number_fails(base, synced):
    order_id, cp_order_id = synced
    base.orders.update(order_id, {"Order Number": "#2002"})

    with pytest.raises(ImmutableFieldError) as exc:
        update_order(base, order_id)

    assert "CRITICAL ERROR" in str(exc.value)
    assert 'Order Number was changed from "#1001" to "#2002"' in str(exc.value)
    assert [c.field for c in exc.value.changes] == ["Order Number"]
    assert base.cp_orders.updated == []


def test_reports_every_changed_field(base, synced):
    order_id, cp_order_id = synced
    base.cp_orders.update(cp_order_id, {"Variant ID": "49889638088997"})
    base.orders.update(order_id, {"Customer ID": "C-99", "Variant ID": "111"})

    with pytest.raises(ImmutableFieldError) as exc:
        update_order(base, order_id)

    assert [c.field for c in exc.value.changes] == ["Variant ID", "Customer ID"]


def test_requires_synced_cp_order(base, make_order):
    order_id = base.orders.add(make_order(**{"Order ID": "O-unsynced"}))

    with pytest.raises(RecordNotFound, match="may not have been synced yet"):
        update_order(base, order_id)
