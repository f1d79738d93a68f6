import copy

import pytest
import requests
from pyairtable.testing import fake_id
from requests.exceptions import HTTPError

from cp_sync.client import SyncBase


def http_error(status_code: int) -> HTTPError:
    response = requests.Response()
    response.status_code = status_code
    return HTTPError(f"{status_code} Client Error", response=response)


class FakeTable:
    """In-memory stand-in for pyairtable.Table (all / get / create / update)."""

    def __init__(self, name):
        self.name = name
        self.records = {}
        self.created = []
        self.updated = []
        self.typecast_updates = []

    def add(self, fields, record_id=None):
        record_id = record_id or fake_id()
        self.records[record_id] = {
            "id": record_id,
            "createdTime": "2025-01-01T00:00:00.000Z",
            "fields": {k: v for k, v in fields.items() if v is not None},
        }
        return record_id

    def all(self, fields=None, **options):
        out = []
        for rec in self.records.values():
            rec = copy.deepcopy(rec)
            if fields:
                rec["fields"] = {k: v for k, v in rec["fields"].items() if k in fields}
            out.append(rec)
        return out

    def get(self, record_id, **options):
        if record_id not in self.records:
            raise http_error(404)
        return copy.deepcopy(self.records[record_id])

    def create(self, fields, typecast=False, **options):
        record_id = self.add(fields)
        self.created.append(record_id)
        return copy.deepcopy(self.records[record_id])

    def update(self, record_id, fields, replace=False, typecast=False, **options):
        if record_id not in self.records:
            raise http_error(404)
        stored = self.records[record_id]["fields"]
        for key, value in fields.items():
            if value is None:
                stored.pop(key, None)
            else:
                stored[key] = value
        self.updated.append((record_id, dict(fields)))
        if typecast:
            self.typecast_updates.append(record_id)
        return copy.deepcopy(self.records[record_id])

    def linked_to(self, link_field, record_id):
        return [r for r in self.records.values() if record_id in r["fields"].get(link_field, [])]


@pytest.fixture
def base():
    return SyncBase(
        orders=FakeTable("Orders"),
        cp_orders=FakeTable("CP Orders"),
        cp_order_items=FakeTable("CP OrderItems"),
        products=FakeTable("Products"),
        variants=FakeTable("Variants"),
        customers=FakeTable("Customers"),
        syncbase_orders=FakeTable("Syncbase Orders"),
        users=FakeTable("Users"),
    )


@pytest.fixture
def catalog(base):
    """One product, one variant and one customer to join against."""
    return {
        "product": base.products.add({"Product ID": 9677986496805}, "recProduct00001"),
        "variant": base.variants.add({"Variant ID": "49889638088997", "Price": "200.00"}, "recVariant00001"),
        "customer": base.customers.add({"Customer ID": "C-77"}, "recCustomer0001"),
    }


def order_fields(**overrides):
    fields = {
        "Order ID": "O1",
        "Order Number": "#1001",
        "Created At": "2025-03-01T10:00:00.000Z",
        "Order Payment Status": "PAID",
        "Order Total": 600.0,
        "Customer ID": "C-77",
        "Shipping City": "Montreal",
        "Product ID": "9677986496805",
        "Variant ID": 49889638088997.0,
        "Item ID": "I1",
        "SKU": "1466136",
        "Quantity": 3,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def make_order():
    return order_fields
