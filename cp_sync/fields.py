import logging
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

# -------------- Orders / CP Orders --------------
ORDER_ID = "Order ID"
ORDER_NUMBER = "Order Number"
CREATED_AT = "Created At"
CUSTOMER_ID = "Customer ID"
PRODUCT_ID = "Product ID"
VARIANT_ID = "Variant ID"
ITEM_ID = "Item ID"
SKU = "SKU"
QUANTITY = "Quantity"
ORDER_PAYMENT_STATUS = "Order Payment Status"
CUSTOMER_EMAIL = "Customer Email"

# -------------- Links --------------
CUSTOMERS_LINK = "Customers"
PRODUCTS_LINK = "Products"
VARIANTS_LINK = "Variants"
CP_ORDERS_LINK = "CP Orders"
SYNCBASE_ORDERS_LINK = "Syncbase Orders"

# -------------- CP OrderItems / Variants / Users --------------
PRICE = "Price"
PRICE_AT_TIME = "Price At Time"
EMAIL_ADDRESS = "Email address"
VARIANT_SELECT = "Variant"

# Copied on every update of an existing CP Order
CP_ORDER_MUTABLE_FIELDS = [
    "Order Fulfillment Status",
    "Order Payment Status",
    "Order Currency",
    "Order Discount",
    "Order Subtotal",
    "Order Shipping price",
    "Order Tax",
    "Order Total",
    "Total Weight",
    "Customer ID",
    "Shipping First Name",
    "Shipping Last Name",
    "Shipping Company Name",
    "Shipping Address 1",
    "Shipping Address 2",
    "Shipping City",
    "Shipping Province",
    "Shipping Postal Code",
    "Shipping Country",
    "Tags",
    "Notes",
    "Line Item Properties",
    "Line Item Shipping Company",
    "Line Item Tracking Number",
    "Order Additional Details",
    "Channel",
    "Order Delivery Status",
    "Line Item Fulfillment Status",
    "Order Delivery Method",
    "Order Discount Codes",
    "Airtable -> Shopify last successful update",
    "Shopify -> Airtable last successful update",
]

# Written once when the CP Order is created
CP_ORDER_CREATE_FIELDS = [ORDER_ID, ORDER_NUMBER, CREATED_AT] + CP_ORDER_MUTABLE_FIELDS


def extract(fields: Dict[str, Any], names: Iterable[str]) -> Dict[str, Any]:
    """Copy the named cells; cells Airtable omitted come back as None."""
    return {name: fields.get(name) for name in names}


def order_quantity(fields: Dict[str, Any]) -> int:
    value = fields.get(QUANTITY)
    try:
        quantity = int(value or 0)
    except (TypeError, ValueError):
        logger.warning(f"Invalid quantity {value!r}, defaulting to 1")
        return 1
    return quantity or 1


def parse_price(value: Any, variant_id: Any = None) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid price format for Variant ID {variant_id}: {value}")
        return None
