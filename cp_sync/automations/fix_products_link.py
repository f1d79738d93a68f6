"""
Fix missing Products link

Trigger: When a record is created or updated in "CP OrderItems" and its
Products link is empty while its Variants link is set.
"""

import logging
from typing import Any, Dict

from .. import fields as f
from ..errors import MissingFieldError, RecordNotFound
from ..lookups import cell, find_by_field, is_empty, link, linked_ids
from .common import load_record

logger = logging.getLogger(__name__)


def fix_products_link(base, order_item_record_id: str) -> Dict[str, Any]:
    item = load_record(base.cp_order_items, order_item_record_id, "CP OrderItem")

    variant_ids = linked_ids(cell(item, f.VARIANTS_LINK))
    if not variant_ids:
        msg = "Variants link is empty. Cannot fetch Product ID."
        logger.error(msg)
        raise MissingFieldError(msg)

    variant_record_id = variant_ids[0]
    variant = load_record(base.variants, variant_record_id, "Variant")

    product_id = cell(variant, f.PRODUCT_ID)
    sku = cell(variant, f.SKU)
    if is_empty(product_id):
        msg = f"Variant record {variant_record_id} has no Product ID"
        logger.error(msg)
        raise MissingFieldError(msg)
    logger.info(f"Found Product ID: {product_id} from Variant: {variant_record_id}")

    product = find_by_field(base.products, f.PRODUCT_ID, product_id)
    if not product:
        msg = f"Product not found for Product ID: {product_id}"
        logger.error(msg)
        raise RecordNotFound(msg)

    payload = {
        f.PRODUCTS_LINK: link(product["id"]),
        f.PRODUCT_ID: product_id,
    }
    if not is_empty(sku):
        payload[f.SKU] = sku

    try:
        base.cp_order_items.update(order_item_record_id, payload)
    except Exception as e:
        logger.error(f"Failed to update CP OrderItem {order_item_record_id}: {e}")
        raise
    logger.info(f"Successfully linked Product {product['id']} to CP OrderItem {order_item_record_id}")

    return {
        "order_item_record_id": order_item_record_id,
        "product_record_id": product["id"],
        "message": f"Successfully linked Product {product['id']} to OrderItem {order_item_record_id}",
    }
