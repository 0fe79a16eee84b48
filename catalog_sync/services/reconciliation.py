"""Reconciliation — diff ERP truth against the Shopify catalog snapshot.

Pure functions, no I/O. For fixed inputs the output is fully
deterministic: changes come out in catalog iteration order, unmatched
barcodes in cost-feed order.

Price rules (per variant with a barcode and a positive ERP base price):
  - discount present (positive, not above base): price = discount,
    compareAtPrice = base
  - otherwise: price = base, compareAtPrice = null
  - emit only when either string differs from the current value

Status rules (per product):
  - in stock if ANY barcode-matched variant has stock > 0
  - desired status ACTIVE if in stock, else DRAFT
  - only ACTIVE and DRAFT products are touched; ARCHIVED (and any other
    status) is never reactivated or drafted

Cost rules (per barcode in the merged cost feed):
  - barcode in the catalog: emit when the canonical cost differs
  - barcode not in the catalog: reported in unmatched_barcodes
"""

import logging
from decimal import Decimal

from ..models import (
    ACTIVE,
    DRAFT,
    CostChange,
    PriceChange,
    ReconciliationResult,
    RemoteProduct,
    RemoteVariant,
    SourceRecord,
    StatusChange,
)
from ..utils import canonical_amount

log = logging.getLogger(__name__)

# Statuses the sync is allowed to move between
MANAGED_STATUSES = {ACTIVE, DRAFT}


def desired_prices(record: SourceRecord) -> tuple[str, str | None] | None:
    """(price, compareAtPrice) the variant should carry, or None to leave it."""
    base = record.base_price
    if base is None or base <= 0:
        return None
    discount = record.discount_price
    if discount is not None and Decimal(0) < discount <= base:
        return canonical_amount(discount), canonical_amount(base)
    return canonical_amount(base), None


def price_change_for(variant: RemoteVariant, record: SourceRecord | None) -> PriceChange | None:
    if record is None:
        return None
    wanted = desired_prices(record)
    if wanted is None:
        return None
    price, compare_at = wanted
    if price == variant.price and compare_at == variant.compare_at_price:
        return None
    return PriceChange(variant_id=variant.id, price=price, compare_at_price=compare_at)


def reconcile_catalog(
    records: dict[str, SourceRecord],
    products: dict[str, RemoteProduct],
) -> ReconciliationResult:
    """Price and status changes for the whole catalog."""
    result = ReconciliationResult()

    for product in products.values():
        in_stock = False
        for variant in product.variants:
            if not variant.barcode:
                continue
            record = records.get(variant.barcode)
            if record is not None and record.in_stock:
                in_stock = True
            change = price_change_for(variant, record)
            if change is not None:
                result.price_changes.append(change)

        if product.status not in MANAGED_STATUSES:
            continue
        wanted = ACTIVE if in_stock else DRAFT
        if wanted != product.status:
            result.status_changes.append(StatusChange(product_id=product.id, status=wanted))

    log.info(
        f"Reconciled {len(products)} products: {len(result.price_changes)} price changes, "
        f"{len(result.status_changes)} status changes"
    )
    return result


def reconcile_costs(
    records: dict[str, SourceRecord],
    variants: dict[str, RemoteVariant],
) -> ReconciliationResult:
    """Cost changes plus the cost barcodes the catalog does not know."""
    result = ReconciliationResult()

    for barcode, record in records.items():
        cost = canonical_amount(record.cost)
        if cost is None:
            continue
        variant = variants.get(barcode)
        if variant is None or not variant.inventory_item_id:
            result.unmatched_barcodes.append(barcode)
            continue
        if cost != variant.unit_cost:
            result.cost_changes.append(CostChange(inventory_item_id=variant.inventory_item_id, cost=cost))

    log.info(
        f"Reconciled {len(records)} costs: {len(result.cost_changes)} changes, "
        f"{len(result.unmatched_barcodes)} unmatched barcodes"
    )
    return result


def reconcile(
    records: dict[str, SourceRecord],
    products: dict[str, RemoteProduct] | None = None,
    cost_variants: dict[str, RemoteVariant] | None = None,
) -> ReconciliationResult:
    """Run whichever reconciliations the supplied remote state allows."""
    result = ReconciliationResult()
    if products is not None:
        catalog = reconcile_catalog(records, products)
        result.price_changes = catalog.price_changes
        result.status_changes = catalog.status_changes
    if cost_variants is not None:
        costs = reconcile_costs(records, cost_variants)
        result.cost_changes = costs.cost_changes
        result.unmatched_barcodes = costs.unmatched_barcodes
    return result
