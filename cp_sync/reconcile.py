"""
Pure planning for the Orders -> CP Orders / CP OrderItems mirror.

Nothing here talks to Airtable: given what the automation read, these
functions decide which fields to write and how many item rows are missing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from . import fields as f
from .lookups import Record, as_key, is_empty, link

logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"


@dataclass
class CpOrderWrite:
    action: str
    record_id: Optional[str]
    fields: Dict[str, Any]


@dataclass
class FieldChange:
    field: str
    stored: Any
    current: Any

    def __str__(self):
        return f'{self.field}: "{as_key(self.stored)}" -> "{as_key(self.current)}"'


def plan_cp_order_write(order_fields: Dict[str, Any], existing_cp_order: Optional[Record],
                        customer_record_id: Optional[str] = None) -> CpOrderWrite:
    """Create with the full field set, or update only the mutable subset."""
    if existing_cp_order:
        payload = f.extract(order_fields, f.CP_ORDER_MUTABLE_FIELDS)
        plan = CpOrderWrite(UPDATE, existing_cp_order["id"], payload)
    else:
        payload = f.extract(order_fields, f.CP_ORDER_CREATE_FIELDS)
        plan = CpOrderWrite(CREATE, None, payload)
    if customer_record_id:
        payload[f.CUSTOMERS_LINK] = link(customer_record_id)
    return plan


def items_to_create(quantity: int, existing_count: int, item_id: Any = None) -> int:
    """Rows still missing for a line item. Excess rows are reported, never removed."""
    missing = quantity - existing_count
    if missing < 0:
        logger.warning(
            f"Warning: More records exist ({existing_count}) than expected quantity ({quantity}) for Item ID {item_id}"
        )
        return 0
    return missing


def build_order_item_fields(order_fields: Dict[str, Any], cp_order_record_id: str,
                            product_record_id: Optional[str] = None,
                            variant_record_id: Optional[str] = None,
                            price_at_time: Optional[float] = None) -> Dict[str, Any]:
    item = {
        f.PRODUCT_ID: order_fields.get(f.PRODUCT_ID),
        f.VARIANT_ID: order_fields.get(f.VARIANT_ID),
        f.ITEM_ID: order_fields.get(f.ITEM_ID),
        f.SKU: order_fields.get(f.SKU),
        f.PRICE_AT_TIME: price_at_time,
        f.CP_ORDERS_LINK: link(cp_order_record_id),
    }
    if product_record_id:
        item[f.PRODUCTS_LINK] = link(product_record_id)
    if variant_record_id:
        item[f.VARIANTS_LINK] = link(variant_record_id)
    return item


def find_immutable_changes(stored: Dict[str, Any], current: Dict[str, Any],
                           names: Sequence[str]) -> List[FieldChange]:
    """A field changed when it was stored and no longer matches the source."""
    changes = []
    for name in names:
        stored_value = stored.get(name)
        if is_empty(stored_value):
            continue
        if as_key(stored_value) != as_key(current.get(name)):
            changes.append(FieldChange(name, stored_value, current.get(name)))
    return changes
