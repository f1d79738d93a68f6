"""
Fix old SKUs (one CP OrderItem per run)

Trigger: Scheduled. A "Find records" step selects CP OrderItems whose
Products and Variants links are empty and whose SKU is set, and a repeating
group runs this for each of them.

Legacy SKUs predate the product/variant linking, so they are resolved from a
fixed mapping instead of the Variants table.
"""

import logging
from typing import Any, Dict, NamedTuple

from .. import fields as f
from ..errors import MissingFieldError, RecordNotFound, UnmappedSkuError
from ..lookups import as_key, cell, find_by_field, is_empty, link
from .common import load_record

logger = logging.getLogger(__name__)


class SkuMapping(NamedTuple):
    product_id: str
    variant_id: str
    price: float


SKU_MAPPING = {
    "1466136": SkuMapping("9677986496805", "49889638088997", 200.00),
    "1466167": SkuMapping("9677986496805", "49889638088997", 300.00),
    "1466169": SkuMapping("9677986496805", "49889638088997", 400.00),
    "1466254": SkuMapping("9677986496805", "49889638121765", 1500.00),
    "1466256": SkuMapping("9677986496805", "49889638154533", 1700.00),
    "1466258": SkuMapping("9677986496805", "49889638187301", 2500.00),
    "1466260": SkuMapping("9677986496805", "49889638220069", 2800.00),
    "1466262": SkuMapping("9677986496805", "49889638252837", 3200.00),
    "1466264": SkuMapping("9677986496805", "49889638285605", 3500.00),
}


def lookup_sku(sku: Any) -> SkuMapping:
    sku_str = as_key(sku)
    mapping = SKU_MAPPING.get(sku_str)
    if not mapping:
        msg = f"SKU {sku_str} not found in mapping. This SKU is not in the old SKUs list."
        logger.error(msg)
        raise UnmappedSkuError(msg)
    return mapping


def fix_old_sku(base, order_item_record_id: str) -> Dict[str, Any]:
    item = load_record(base.cp_order_items, order_item_record_id, "CP OrderItem")

    sku = cell(item, f.SKU)
    if is_empty(sku):
        msg = "SKU is empty. Cannot process this record."
        logger.error(msg)
        raise MissingFieldError(msg)

    sku_str = as_key(sku)
    logger.info(f"Processing SKU: {sku_str}")
    mapping = lookup_sku(sku_str)
    logger.info(
        f"Found mapping for SKU {sku_str}: Product ID {mapping.product_id}, "
        f"Variant ID {mapping.variant_id}, Price At Time {mapping.price}"
    )

    product = find_by_field(base.products, f.PRODUCT_ID, mapping.product_id)
    if not product:
        msg = f"Product not found for Product ID: {mapping.product_id}"
        logger.error(msg)
        raise RecordNotFound(msg)

    variant = find_by_field(base.variants, f.VARIANT_ID, mapping.variant_id)
    if not variant:
        msg = f"Variant not found for Variant ID: {mapping.variant_id}"
        logger.error(msg)
        raise RecordNotFound(msg)

    try:
        base.cp_order_items.update(order_item_record_id, {
            f.PRODUCTS_LINK: link(product["id"]),
            f.VARIANTS_LINK: link(variant["id"]),
            f.PRODUCT_ID: mapping.product_id,
            f.VARIANT_ID: mapping.variant_id,
            f.PRICE_AT_TIME: mapping.price,
        })
    except Exception as e:
        logger.error(f"Failed to update CP OrderItem {order_item_record_id}: {e}")
        raise
    logger.info(f"Successfully updated CP OrderItem {order_item_record_id}")

    return {
        "order_item_record_id": order_item_record_id,
        "product_record_id": product["id"],
        "variant_record_id": variant["id"],
        "sku": sku_str,
        "message": f"Successfully fixed old SKU {sku_str} for OrderItem {order_item_record_id}",
    }
