"""Lookups shared by the Orders automations."""

import logging
from typing import Any, Dict, Optional, Tuple

from .. import fields as f
from ..errors import MissingFieldError, RecordNotFound
from ..lookups import Record, cell, find_by_field, get_record, is_empty

logger = logging.getLogger(__name__)


def load_record(table, record_id: str, label: str) -> Record:
    record = get_record(table, record_id)
    if not record:
        msg = f"{label} record not found with ID: {record_id}"
        logger.error(msg)
        raise RecordNotFound(msg)
    return record


def require_order_id(order: Record) -> Any:
    order_id = cell(order, f.ORDER_ID)
    if is_empty(order_id):
        msg = "Order ID is required but was not found in the record"
        logger.error(msg)
        raise MissingFieldError(msg)
    return order_id


def find_customer_record_id(base, customer_id: Any) -> Optional[str]:
    if is_empty(customer_id):
        return None
    record = find_by_field(base.customers, f.CUSTOMER_ID, customer_id)
    if not record:
        logger.warning(f"Customer not found for Customer ID: {customer_id}")
        return None
    return record["id"]


def find_product_record_id(base, product_id: Any) -> Optional[str]:
    if is_empty(product_id):
        return None
    record = find_by_field(base.products, f.PRODUCT_ID, product_id)
    if not record:
        logger.warning(f"Product not found for Product ID: {product_id}")
        return None
    return record["id"]


def find_variant(base, variant_id: Any) -> Tuple[Optional[str], Optional[float]]:
    """Variant record id and its current price, captured as Price At Time."""
    if is_empty(variant_id):
        return None, None
    record = find_by_field(base.variants, f.VARIANT_ID, variant_id, extra_fields=[f.PRICE])
    if not record:
        logger.warning(f"Variant not found for Variant ID: {variant_id}")
        return None, None
    return record["id"], f.parse_price(cell(record, f.PRICE), variant_id)


def find_cp_order(base, order_id: Any) -> Optional[Record]:
    return find_by_field(base.cp_orders, f.ORDER_ID, order_id)


def require_cp_order(base, order_id: Any) -> Record:
    """The synced CP Order, re-fetched with every field."""
    existing = find_cp_order(base, order_id)
    if not existing:
        msg = f"CP Order not found for Order ID: {order_id}. This order may not have been synced yet."
        logger.error(msg)
        raise RecordNotFound(msg)
    logger.info(f"Found CP Order record {existing['id']} for Order ID: {order_id}")
    record = get_record(base.cp_orders, existing["id"])
    if not record:
        msg = f"Failed to fetch CP Order record {existing['id']}"
        logger.error(msg)
        raise RecordNotFound(msg)
    return record


def write_cp_order(table, record_id: Optional[str], payload: Dict[str, Any]) -> str:
    """Create when record_id is None, otherwise update in place."""
    if record_id is None:
        return table.create(payload)["id"]
    try:
        table.update(record_id, payload)
    except Exception as e:
        logger.error(f"Failed to update CP Order record {record_id}: {e}")
        raise
    return record_id
