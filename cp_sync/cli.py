#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CP Orders Sync - command line entry point

Each sub-command runs one automation against the base configured in .env
and prints its output as JSON for the next automation step.

Usage:
  cp-sync sync-order recXXXXXXXXXXXXXX
  cp-sync migrate --dry-run
"""

import sys
import json
import logging
import argparse

from .automations.bulk_migration import migrate_orders
from .automations.fix_old_skus import fix_old_sku
from .automations.fix_products_link import fix_products_link
from .automations.match_users import match_order_to_user, match_user_to_order
from .automations.orders_create import sync_order
from .automations.orders_update import update_order
from .automations.orders_validation import validate_order
from .client import SyncBase
from .config import SyncConfig, check_required_env, setup_logging
from .errors import SyncError

logger = logging.getLogger("cp_sync")

RECORD_COMMANDS = {
    "sync-order": (sync_order, "Mirror one Orders record into CP Orders / CP OrderItems"),
    "update-order": (update_order, "Validate immutable fields, then update the CP Order"),
    "validate-order": (validate_order, "Only check that immutable fields did not change"),
    "fix-old-sku": (fix_old_sku, "Backfill product/variant/price for a legacy SKU"),
    "fix-products-link": (fix_products_link, "Link the Product of a CP OrderItem from its Variant"),
    "match-order-user": (match_order_to_user, "Link a Syncbase Order to the user with the same email"),
    "match-user-order": (match_user_to_order, "Link a user to their paid transport order"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cp-sync",
        description="Airtable automations for CP Orders, CP OrderItems and Users",
    )
    parser.add_argument("--log-level", default="INFO",
                        help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, (_, help_text) in RECORD_COMMANDS.items():
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("record_id", help="Airtable record id of the triggering record")
        if name == "sync-order":
            cmd.add_argument("--dry-run", action="store_true",
                             help="Read everything, write nothing")

    migrate = sub.add_parser("migrate", help="Run the create flow for every Orders record")
    migrate.add_argument("--dry-run", action="store_true",
                         help="Read everything, write nothing")
    return parser


def run(args, base: SyncBase, config: SyncConfig) -> dict:
    if args.command == "migrate":
        stats = migrate_orders(base, dry_run=args.dry_run, progress_every=config.progress_every)
        return {"summary": stats.summary()}
    func, _ = RECORD_COMMANDS[args.command]
    if args.command == "sync-order":
        return func(base, args.record_id, dry_run=args.dry_run)
    return func(base, args.record_id)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    check_required_env()
    config = SyncConfig.from_env()
    setup_logging(args.log_level, config.log_file)

    try:
        output = run(args, SyncBase.from_config(config), config)
    except SyncError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
