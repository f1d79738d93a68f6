"""
Bulk migration: Orders -> CP Orders / CP OrderItems

Trigger: Scheduled automation, run once by hand.

Runs the create flow for every Orders record. A failing record is logged and
counted, and the run moves on to the next one.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import List

from .. import fields as f
from ..lookups import cell, is_empty
from ..reconcile import CREATE, UPDATE
from .orders_create import ITEM_CREATED, sync_order_record

logger = logging.getLogger(__name__)

MAX_LOGGED_ERRORS = 20


@dataclass
class MigrationStats:
    total_records: int = 0
    processed_records: int = 0
    skipped_records: int = 0
    created_cp_orders: int = 0
    updated_cp_orders: int = 0
    created_order_items: int = 0
    errors: List[str] = field(default_factory=list)

    def summary(self) -> dict:
        data = asdict(self)
        data["errors_count"] = len(data.pop("errors"))
        return data

    def record_write(self, kind: str):
        """Count one CP Order / CP OrderItem write as soon as it happens."""
        if kind == CREATE:
            self.created_cp_orders += 1
        elif kind == UPDATE:
            self.updated_cp_orders += 1
        elif kind == ITEM_CREATED:
            self.created_order_items += 1


def migrate_orders(base, dry_run: bool = False, progress_every: int = 50) -> MigrationStats:
    logger.info("=== Starting Bulk Migration ===")
    logger.info("Fetching all Orders records...")
    orders = base.orders.all()
    logger.info(f"Found {len(orders)} records in Orders table")

    stats = MigrationStats(total_records=len(orders))

    for order in orders:
        if is_empty(cell(order, f.ORDER_ID)):
            stats.errors.append(f"Record {order['id']} has no Order ID, skipping")
            stats.skipped_records += 1
            continue
        try:
            sync_order_record(base, order, dry_run=dry_run, on_write=stats.record_write)
        except Exception as e:
            msg = f"Error processing record {order['id']}: {e}"
            logger.error(msg)
            stats.errors.append(msg)
            continue

        stats.processed_records += 1

        if progress_every and stats.processed_records % progress_every == 0:
            logger.info(f"Progress: {stats.processed_records}/{stats.total_records} records processed")

    log_summary(stats)
    return stats


def log_summary(stats: MigrationStats):
    logger.info("=== Migration Complete ===")
    logger.info(f"Total Orders records: {stats.total_records}")
    logger.info(f"Records processed: {stats.processed_records}")
    logger.info(f"Records skipped: {stats.skipped_records}")
    logger.info(f"CP Orders created: {stats.created_cp_orders}")
    logger.info(f"CP Orders updated: {stats.updated_cp_orders}")
    logger.info(f"CP OrderItems created: {stats.created_order_items}")
    logger.info(f"Errors: {len(stats.errors)}")

    if stats.errors:
        logger.info("Errors encountered:")
        for error in stats.errors[:MAX_LOGGED_ERRORS]:
            logger.info(f"  - {error}")
        if len(stats.errors) > MAX_LOGGED_ERRORS:
            logger.info(f"  ... and {len(stats.errors) - MAX_LOGGED_ERRORS} more errors")
