"""
CP Orders Sync

Airtable automations that mirror the Shopify-fed "Orders" table into
"CP Orders" / "CP OrderItems", repair order-item links, and match
"Syncbase Orders" to "Users" by email.
"""

__version__ = "0.1.0"
