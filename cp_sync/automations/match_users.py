"""
Syncbase Orders <-> Users matching by email

match_order_to_user
    Trigger: When a record is created or updated in "Syncbase Orders" with
    payment status PAID and one of the transport variants.
match_user_to_order
    Trigger: Button click in "Users".

Emails are compared trimmed and case-insensitive. Exactly one match is
required; several matches always fail the run.
"""

import logging
from typing import Any, Dict, List

from .. import fields as f
from ..errors import MatchError, MissingFieldError
from ..lookups import Record, as_key, cell, is_empty, link, normalize_email, select_name
from .common import load_record

logger = logging.getLogger(__name__)

PAID = "PAID"

VALID_VARIANTS = {
    "51356483191077": "Transport Included",
    "51356483223845": "Without Transport",
}


def variant_name(variant_id: Any):
    return VALID_VARIANTS.get(as_key(variant_id))


def is_matching_order(order: Record, email: str) -> bool:
    order_email = cell(order, f.CUSTOMER_EMAIL)
    if is_empty(order_email) or normalize_email(order_email) != email:
        return False
    if select_name(cell(order, f.ORDER_PAYMENT_STATUS)) != PAID:
        return False
    return variant_name(cell(order, f.VARIANT_ID)) is not None


def link_user(base, user_record_id: str, order_record_id: str, name: str):
    try:
        # No typecast: an unknown Variant option must fail instead of being created
        base.users.update(user_record_id, {f.SYNCBASE_ORDERS_LINK: link(order_record_id), f.VARIANT_SELECT: name})
    except Exception as e:
        logger.error(f"Failed to update User {user_record_id}: {e}")
        raise
    logger.info(f"Successfully linked Order {order_record_id} to User {user_record_id}")
    logger.info(f"Set Variant field to: {name}")


def matched(user_record_id: str, order_record_id: str, name: str) -> Dict[str, Any]:
    return {
        "user_record_id": user_record_id,
        "order_record_id": order_record_id,
        "variant_name": name,
        "message": f"Successfully matched and linked order {order_record_id} ({name}) to user {user_record_id}",
    }


def _ids(records: List[Record]) -> List[str]:
    return [r["id"] for r in records]


def match_order_to_user(base, order_record_id: str) -> Dict[str, Any]:
    order = load_record(base.syncbase_orders, order_record_id, "Order")

    order_email = cell(order, f.CUSTOMER_EMAIL)
    if is_empty(order_email):
        msg = "Order has no customer email. Cannot search for users."
        logger.error(msg)
        raise MissingFieldError(msg)

    variant_id = cell(order, f.VARIANT_ID)
    if is_empty(variant_id):
        msg = "Order has no Variant ID."
        logger.error(msg)
        raise MissingFieldError(msg)
    name = variant_name(variant_id)
    if name is None:
        msg = f"Variant ID {as_key(variant_id)} is not one of the valid transport variants."
        logger.error(msg)
        raise MatchError(msg)

    status = select_name(cell(order, f.ORDER_PAYMENT_STATUS))
    if status != PAID:
        msg = f"Order payment status is {status!r}, expected {PAID}."
        logger.error(msg)
        raise MatchError(msg)

    email = normalize_email(order_email)
    logger.info(f"Searching for users with email: {email} (Variant: {name})")

    users = [
        u for u in base.users.all(fields=[f.EMAIL_ADDRESS])
        if not is_empty(cell(u, f.EMAIL_ADDRESS)) and normalize_email(cell(u, f.EMAIL_ADDRESS)) == email
    ]
    logger.info(f"Found {len(users)} matching user(s)")

    if not users:
        msg = f"No matching users found for email {email}."
        logger.error(msg)
        raise MatchError(msg)
    if len(users) > 1:
        msg = f"Multiple matching users found ({len(users)}). This is not allowed. User IDs: {', '.join(_ids(users))}"
        logger.error(msg)
        raise MatchError(msg, _ids(users))

    user_record_id = users[0]["id"]
    link_user(base, user_record_id, order_record_id, name)
    return matched(user_record_id, order_record_id, name)


def match_user_to_order(base, user_record_id: str) -> Dict[str, Any]:
    user = load_record(base.users, user_record_id, "User")

    user_email = cell(user, f.EMAIL_ADDRESS)
    if is_empty(user_email):
        msg = "User has no email. Cannot search for orders."
        logger.error(msg)
        raise MissingFieldError(msg)

    email = normalize_email(user_email)
    logger.info(f"Searching for orders with email: {email}")

    orders = base.syncbase_orders.all(fields=[f.CUSTOMER_EMAIL, f.ORDER_PAYMENT_STATUS, f.VARIANT_ID])
    matches = [o for o in orders if is_matching_order(o, email)]
    logger.info(f"Found {len(matches)} matching order(s)")

    if not matches:
        logger.info(f"No matching orders found for email {email} with payment status {PAID} and valid variant ID.")
        return {"message": f"No matching orders found for {email}"}
    if len(matches) > 1:
        msg = f"Multiple matching orders found ({len(matches)}). This is not allowed. Order IDs: {', '.join(_ids(matches))}"
        logger.error(msg)
        raise MatchError(msg, _ids(matches))

    order = matches[0]
    name = variant_name(cell(order, f.VARIANT_ID))
    link_user(base, user_record_id, order["id"], name)
    return matched(user_record_id, order["id"], name)
