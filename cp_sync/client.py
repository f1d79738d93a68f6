from pyairtable import Api

from .config import SyncConfig


class SyncBase:
    """The tables every automation works against, keyed by role."""

    def __init__(self, orders, cp_orders, cp_order_items, products, variants, customers,
                 syncbase_orders=None, users=None):
        self.orders = orders
        self.cp_orders = cp_orders
        self.cp_order_items = cp_order_items
        self.products = products
        self.variants = variants
        self.customers = customers
        self.syncbase_orders = syncbase_orders
        self.users = users

    @classmethod
    def from_config(cls, config: SyncConfig) -> "SyncBase":
        api = Api(config.api_key, timeout=(config.timeout, config.timeout))
        base_id = config.base_id
        return cls(
            orders=api.table(base_id, config.orders_table),
            cp_orders=api.table(base_id, config.cp_orders_table),
            cp_order_items=api.table(base_id, config.cp_order_items_table),
            products=api.table(base_id, config.products_table),
            variants=api.table(base_id, config.variants_table),
            customers=api.table(base_id, config.customers_table),
            syncbase_orders=api.table(base_id, config.syncbase_orders_table),
            users=api.table(base_id, config.users_table),
        )
