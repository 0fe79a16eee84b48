"""Shopify catalog snapshot — products, variants and unit costs.

Two independent paginated reads:
  fetch_products()        product id -> RemoteProduct (status + variants
                          with price / compareAtPrice)
  fetch_cost_variants()   barcode -> RemoteVariant (inventory item id +
                          current unit cost)

Amounts are canonicalized on the way in so the reconciler compares like
with like ("100.00" from Shopify equals 100 from the ERP).
"""

import logging
from typing import TYPE_CHECKING

from ..models import RemoteProduct, RemoteVariant
from ..utils import canonical_amount
from .graphql_queries import PRODUCT_VARIANTS_QUERY, PRODUCTS_QUERY
from .pagination import Page, collect_all, connection_page
from .shopify import ShopifyTransport

if TYPE_CHECKING:
    from ..config import Settings

log = logging.getLogger(__name__)


def _products_page(data: dict) -> Page:
    return connection_page(data.get("products"))


def _variants_page(data: dict) -> Page:
    return connection_page(data.get("productVariants"))


def parse_product(node: dict) -> RemoteProduct:
    product_id = node["id"]
    status = node.get("status") or ""
    variants = []
    page = connection_page(node.get("variants"))
    if page.has_next_page:
        # status is decided from the fetched variants only
        log.warning(f"Catalog: product {product_id} has more than {len(page.nodes)} variants, rest not fetched")
    for v in page.nodes:
        variants.append(RemoteVariant(
            id=v["id"],
            barcode=(v.get("barcode") or "").strip(),
            price=canonical_amount(v.get("price")),
            compare_at_price=canonical_amount(v.get("compareAtPrice")),
            product_id=product_id,
        ))
    return RemoteProduct(id=product_id, status=status, variants=variants)


def parse_cost_variant(node: dict) -> RemoteVariant | None:
    """Variant with its inventory item, or None when it cannot be costed."""
    barcode = (node.get("barcode") or "").strip()
    item = node.get("inventoryItem")
    if not barcode or not item:
        return None
    return RemoteVariant(
        id=node.get("id") or "",
        barcode=barcode,
        inventory_item_id=item["id"],
        unit_cost=canonical_amount((item.get("unitCost") or {}).get("amount")),
    )


class CatalogFetcher:
    def __init__(self, transport: ShopifyTransport, settings: "Settings"):
        self.transport = transport
        self.settings = settings

    async def fetch_products(self) -> dict[str, RemoteProduct]:
        nodes = await collect_all(
            self.transport,
            PRODUCTS_QUERY,
            _products_page,
            variables={
                "first": self.settings.products_page_size,
                "variantsFirst": self.settings.variants_per_product,
            },
            label="products",
        )
        products: dict[str, RemoteProduct] = {}
        for node in nodes:
            product = parse_product(node)
            products[product.id] = product
        return products

    async def fetch_cost_variants(self) -> dict[str, RemoteVariant]:
        nodes = await collect_all(
            self.transport,
            PRODUCT_VARIANTS_QUERY,
            _variants_page,
            variables={"first": self.settings.variants_page_size},
            label="product variants",
        )
        variants: dict[str, RemoteVariant] = {}
        duplicates = 0
        for node in nodes:
            variant = parse_cost_variant(node)
            if variant is None:
                continue
            if variant.barcode in variants:
                duplicates += 1
            variants[variant.barcode] = variant
        if duplicates:
            log.warning(f"Catalog: {duplicates} variants share a barcode; the last one fetched is used")
        return variants
