"""
Orders update handler

Trigger: When a record is updated in "Orders".

Order Number, Product ID, Variant ID and Customer ID must never change once
the order is mirrored. Any difference against the stored CP Order fails the
run; otherwise the mutable fields are copied over.
"""

import logging
from typing import Any, Dict

from .. import fields as f
from ..errors import ImmutableFieldError
from ..lookups import link
from ..reconcile import find_immutable_changes
from .common import find_customer_record_id, load_record, require_cp_order, require_order_id, write_cp_order

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = [f.ORDER_NUMBER, f.PRODUCT_ID, f.VARIANT_ID, f.CUSTOMER_ID]


def update_order(base, order_record_id: str) -> Dict[str, Any]:
    order = load_record(base.orders, order_record_id, "Order")
    order_id = require_order_id(order)
    order_fields = order.get("fields", {})

    cp_order = require_cp_order(base, order_id)
    cp_order_record_id = cp_order["id"]

    changes = find_immutable_changes(cp_order.get("fields", {}), order_fields, IMMUTABLE_FIELDS)
    if changes:
        msg = "CRITICAL ERROR: The following immutable fields were changed, which is not allowed:\n" + "\n".join(
            f'{c.field} was changed from "{c.stored}" to "{c.current}"' for c in changes
        )
        logger.error(msg)
        raise ImmutableFieldError(msg, changes)

    logger.info(f"Validation passed for Order ID: {order_id}. Proceeding with update.")

    payload = f.extract(order_fields, f.CP_ORDER_MUTABLE_FIELDS)
    customer_record_id = find_customer_record_id(base, order_fields.get(f.CUSTOMER_ID))
    if customer_record_id:
        payload[f.CUSTOMERS_LINK] = link(customer_record_id)

    write_cp_order(base.cp_orders, cp_order_record_id, payload)
    logger.info(f"Successfully updated CP Order record {cp_order_record_id} for Order ID: {order_id}")

    return {
        "cp_order_record_id": cp_order_record_id,
        "message": f"Successfully updated order {order_id}. CP Order: {cp_order_record_id}",
    }
