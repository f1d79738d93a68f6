"""
Orders immutable-field validation (no writes)

Trigger: When Order ID, Order Number, Product ID, Variant ID, Item ID,
Customer ID or Quantity is updated in "Orders".

Compares the fields CP Orders stores against the current Orders record and
fails the run when one of them changed. Line item fields live on CP
OrderItems only, so they are reported as not verifiable.
"""

import logging
from typing import Any, Dict, List

from .. import fields as f
from ..errors import ImmutableFieldError
from ..lookups import is_empty
from ..reconcile import FieldChange, find_immutable_changes
from .common import load_record, require_cp_order, require_order_id

logger = logging.getLogger(__name__)

CHECKED_FIELDS = [f.ORDER_NUMBER, f.CUSTOMER_ID]
UNVERIFIABLE_FIELDS = [f.PRODUCT_ID, f.VARIANT_ID, f.ITEM_ID, f.QUANTITY]


def format_report(changed: List[FieldChange], unchanged: List[str], unverifiable: List[str]) -> str:
    lines = ["CRITICAL ERROR: One or more immutable fields were updated in the Orders table.", ""]
    lines.append("Fields that HAVE changed (NOT ALLOWED):")
    if changed:
        lines.extend(f"  ✗ {c}" for c in changed)
    else:
        lines.append("  (none detected)")
    lines.append("")
    lines.append("Fields that have NOT changed:")
    if unchanged:
        lines.extend(f"  ✓ {name}" for name in unchanged)
    else:
        lines.append("  (none checked)")
    lines.append("")
    lines.append("Fields that CANNOT be validated (stored in CP OrderItems, not CP Orders):")
    lines.extend(f"  ? {name}" for name in unverifiable)
    lines.append("")
    lines.append("Please review the Orders record and revert any changes to immutable fields.")
    return "\n".join(lines)


def validate_order(base, order_record_id: str) -> Dict[str, Any]:
    order = load_record(base.orders, order_record_id, "Order")
    order_id = require_order_id(order)

    cp_order = require_cp_order(base, order_id)
    stored = cp_order.get("fields", {})

    changed = find_immutable_changes(stored, order.get("fields", {}), CHECKED_FIELDS)
    changed_names = {c.field for c in changed}
    unchanged = [name for name in CHECKED_FIELDS if name not in changed_names and not is_empty(stored.get(name))]

    if changed:
        msg = format_report(changed, unchanged, UNVERIFIABLE_FIELDS)
        logger.error(msg)
        raise ImmutableFieldError(msg, changed)

    logger.info(f"Validation passed for Order ID: {order_id}")
    return {
        "cp_order_record_id": cp_order["id"],
        "changed_fields": [],
        "unchanged_fields": unchanged,
        "unverifiable_fields": list(UNVERIFIABLE_FIELDS),
        "message": f"No immutable field changes detected for order {order_id}",
    }
