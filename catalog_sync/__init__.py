"""Catalog sync: ERP prices, availability and costs into Shopify."""

__version__ = "0.1.0"
