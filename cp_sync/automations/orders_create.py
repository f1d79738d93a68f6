"""
Orders -> CP Orders / CP OrderItems

Trigger: When a record is created in "Orders".

Upserts the CP Order keyed by Order ID (full field set on create, mutable
subset on update), then tops up the CP OrderItems linked to it so there is
one row per unit of the line item. Existing rows are never deleted.
"""

import logging
from typing import Any, Callable, Dict, Optional

from .. import fields as f
from ..lookups import Record, count_linked, is_empty
from ..reconcile import CREATE, build_order_item_fields, items_to_create, plan_cp_order_write
from .common import (
    find_cp_order,
    find_customer_record_id,
    find_product_record_id,
    find_variant,
    load_record,
    require_order_id,
    write_cp_order,
)

logger = logging.getLogger(__name__)

ITEM_CREATED = "item"


def sync_order(base, order_record_id: str, dry_run: bool = False) -> Dict[str, Any]:
    order = load_record(base.orders, order_record_id, "Order")
    return sync_order_record(base, order, dry_run=dry_run)


def sync_order_record(base, order: Record, dry_run: bool = False,
                      on_write: Optional[Callable[[str], None]] = None) -> Dict[str, Any]:
    """Mirror one Orders record.

    on_write is called with "create" / "update" for the CP Order and with
    "item" for every CP OrderItem, right after each write (or, in a dry run,
    for each write that would happen).
    """
    notify = on_write or (lambda kind: None)
    order_id = require_order_id(order)
    order_fields = order.get("fields", {})
    item_id = order_fields.get(f.ITEM_ID)
    quantity = f.order_quantity(order_fields)
    if is_empty(item_id):
        logger.warning(
            f"Order ID {order_id} has no Item ID; existing CP OrderItems without an Item ID are counted instead"
        )

    customer_record_id = find_customer_record_id(base, order_fields.get(f.CUSTOMER_ID))
    product_record_id = find_product_record_id(base, order_fields.get(f.PRODUCT_ID))
    variant_record_id, price_at_time = find_variant(base, order_fields.get(f.VARIANT_ID))

    existing = find_cp_order(base, order_id)
    plan = plan_cp_order_write(order_fields, existing, customer_record_id)

    if dry_run:
        cp_order_record_id = plan.record_id
    else:
        cp_order_record_id = write_cp_order(base.cp_orders, plan.record_id, plan.fields)
    notify(plan.action)
    if plan.action == CREATE:
        logger.info(f"Created new CP Order record. Record ID: {cp_order_record_id}")
    else:
        logger.info(f"Successfully updated CP Order record {cp_order_record_id} for Order ID: {order_id}")

    # A CP Order that does not exist yet cannot have items linked to it
    existing_count = 0
    if cp_order_record_id:
        existing_count = count_linked(base.cp_order_items, f.CP_ORDERS_LINK, cp_order_record_id, f.ITEM_ID, item_id)
    logger.info(
        f"Found {existing_count} existing CP OrderItem record(s) for Order ID {order_id} with Item ID {item_id}"
    )
    missing = items_to_create(quantity, existing_count, item_id)

    order_item_record_ids = []
    for _ in range(missing):
        if not dry_run:
            item_fields = build_order_item_fields(
                order_fields, cp_order_record_id, product_record_id, variant_record_id, price_at_time
            )
            order_item_record_ids.append(base.cp_order_items.create(item_fields)["id"])
        notify(ITEM_CREATED)
    if not dry_run:
        logger.info(f"Created {len(order_item_record_ids)} CP OrderItem record(s) for Order ID: {order_id}")

    prefix = "[dry run] Would process" if dry_run else "Successfully processed"
    return {
        "cp_order_record_id": cp_order_record_id,
        "cp_order_action": plan.action,
        "order_item_record_ids": order_item_record_ids,
        "existing_item_count": existing_count,
        "items_to_create": missing,
        "dry_run": dry_run,
        "message": f"{prefix} order {order_id}. CP Order: {cp_order_record_id}, OrderItems: {missing}",
    }
