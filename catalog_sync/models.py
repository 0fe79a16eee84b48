"""
models.py — Domain records for the catalog sync

Business Rules:
- Barcode is the join key across ERP feeds and the Shopify catalog
- Only stock > 0 counts as in stock; zero, negative and missing are equal
- Change records carry canonical decimal strings, never floats
- Each change kind serializes to one {"input": {...}} JSONL line

Called by: connectors/, services/
Depends on: nothing
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar

ACTIVE = "ACTIVE"
DRAFT = "DRAFT"
ARCHIVED = "ARCHIVED"


# ── Source side ───────────────────────────────────────────────────────


@dataclass
class SourceRecord:
    """Merged ERP truth for one barcode."""

    barcode: str
    base_price: Decimal | None = None
    discount_price: Decimal | None = None
    stock_balance: Decimal | None = None
    cost: Decimal | None = None

    @property
    def in_stock(self) -> bool:
        return self.stock_balance is not None and self.stock_balance > 0


# ── Remote side ───────────────────────────────────────────────────────


@dataclass
class RemoteVariant:
    id: str
    barcode: str
    price: str | None = None
    compare_at_price: str | None = None
    product_id: str | None = None
    inventory_item_id: str | None = None
    unit_cost: str | None = None


@dataclass
class RemoteProduct:
    id: str
    status: str
    variants: list[RemoteVariant] = field(default_factory=list)


# ── Change records ────────────────────────────────────────────────────


@dataclass(frozen=True)
class PriceChange:
    kind: ClassVar[str] = "prices"

    variant_id: str
    price: str
    compare_at_price: str | None

    def to_input(self) -> dict:
        return {"id": self.variant_id, "price": self.price, "compareAtPrice": self.compare_at_price}


@dataclass(frozen=True)
class StatusChange:
    kind: ClassVar[str] = "statuses"

    product_id: str
    status: str

    def to_input(self) -> dict:
        return {"id": self.product_id, "status": self.status}


@dataclass(frozen=True)
class CostChange:
    kind: ClassVar[str] = "costs"

    inventory_item_id: str
    cost: str

    def to_input(self) -> dict:
        return {"id": self.inventory_item_id, "cost": self.cost}


# ── Results ───────────────────────────────────────────────────────────


@dataclass
class ReconciliationResult:
    price_changes: list[PriceChange] = field(default_factory=list)
    status_changes: list[StatusChange] = field(default_factory=list)
    cost_changes: list[CostChange] = field(default_factory=list)
    unmatched_barcodes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BulkOperationHandle:
    id: str
    status: str

    def as_dict(self) -> dict:
        return {"id": self.id, "status": self.status}


@dataclass(frozen=True)
class BulkOperationStatus:
    id: str
    status: str
    error_code: str | None = None
    object_count: int | None = None
    url: str | None = None
