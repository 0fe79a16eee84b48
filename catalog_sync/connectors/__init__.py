"""
connectors/ — Outbound I/O.

shopify.py          cost-aware GraphQL transport with retry policy
pagination.py       cursor pagination into one materialized list
graphql_queries.py  every GraphQL document the sync sends
catalog.py          Shopify catalog snapshot (products, variants, costs)
erp.py              ERP price / discount / stock / cost feeds
"""
