import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()

REQUIRED_ENV = [
    "AIRTABLE_API_KEY",
    "AIRTABLE_BASE_ID",
]

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class SyncConfig:
    api_key: Optional[str] = None
    base_id: Optional[str] = None
    orders_table: str = "Orders"
    cp_orders_table: str = "CP Orders"
    cp_order_items_table: str = "CP OrderItems"
    products_table: str = "Products"
    variants_table: str = "Variants"
    customers_table: str = "Customers"
    syncbase_orders_table: str = "Syncbase Orders"
    users_table: str = "Users"
    timeout: int = 30
    log_file: str = "cp_sync.log"
    progress_every: int = 50

    @classmethod
    def from_env(cls) -> "SyncConfig":
        return cls(
            api_key=os.getenv("AIRTABLE_API_KEY"),
            base_id=os.getenv("AIRTABLE_BASE_ID"),
            orders_table=os.getenv("AIRTABLE_TABLE_ORDERS") or cls.orders_table,
            cp_orders_table=os.getenv("AIRTABLE_TABLE_CP_ORDERS") or cls.cp_orders_table,
            cp_order_items_table=os.getenv("AIRTABLE_TABLE_CP_ORDER_ITEMS") or cls.cp_order_items_table,
            products_table=os.getenv("AIRTABLE_TABLE_PRODUCTS") or cls.products_table,
            variants_table=os.getenv("AIRTABLE_TABLE_VARIANTS") or cls.variants_table,
            customers_table=os.getenv("AIRTABLE_TABLE_CUSTOMERS") or cls.customers_table,
            syncbase_orders_table=os.getenv("AIRTABLE_TABLE_SYNCBASE_ORDERS") or cls.syncbase_orders_table,
            users_table=os.getenv("AIRTABLE_TABLE_USERS") or cls.users_table,
            timeout=int(os.getenv("AIRTABLE_TIMEOUT", "30")),
            log_file=os.getenv("CP_SYNC_LOG_FILE") or cls.log_file,
            progress_every=int(os.getenv("CP_SYNC_PROGRESS_EVERY", "50")),
        )


def check_required_env():
    missing = [k for k in REQUIRED_ENV if not os.getenv(k)]
    if missing:
        raise SystemExit(f"Missing required env vars: {', '.join(missing)}")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Log to stderr (stdout carries the JSON output) and, when possible, to a file."""
    handlers = [logging.StreamHandler()]
    if log_file:
        try:
            handlers.insert(0, logging.FileHandler(log_file, encoding="utf-8"))
        except OSError:
            pass
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT, handlers=handlers)
