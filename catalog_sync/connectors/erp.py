"""ERP feed connector — prices, discounts, stock balances and costs.

Every endpoint answers GET with {"Items": {"<barcode>": <number>}}.
A barcode missing from a feed means "no data" for that field. Stock
balances may be zero or negative; both mean out of stock.

Feeds are merged field by field in a fixed order: a later feed
overwrites only the field it supplies, never the whole record.
Cost feeds run in ascending priority, so local costs win over costs.

Auth: HTTP Basic, sent only when both username and password are set.
"""

import asyncio
import json
import logging
from dataclasses import fields
from decimal import Decimal
from typing import TYPE_CHECKING

import httpx

from ..errors import ErpFeedError
from ..http_client import http
from ..models import SourceRecord
from ..utils import safe_decimal

if TYPE_CHECKING:
    from ..config import Settings

log = logging.getLogger(__name__)

_RECORD_FIELDS = {f.name for f in fields(SourceRecord)} - {"barcode"}


def merge_feeds(feeds: list[tuple[str, dict[str, Decimal]]]) -> dict[str, SourceRecord]:
    """Fold (field, feed) pairs into one SourceRecord per barcode.

    Feeds are applied in list order; for the same barcode and field the
    last feed wins, while fields supplied by other feeds are kept.
    """
    records: dict[str, SourceRecord] = {}
    for field_name, feed in feeds:
        if field_name not in _RECORD_FIELDS:
            raise ValueError(f"unknown SourceRecord field: {field_name}")
        for barcode, value in feed.items():
            record = records.get(barcode)
            if record is None:
                record = records[barcode] = SourceRecord(barcode=barcode)
            setattr(record, field_name, value)
    return records


def parse_items(url: str, text: str) -> dict[str, Decimal]:
    """Parse an ERP body into barcode -> Decimal, skipping bad entries."""
    try:
        body = json.loads(text, parse_float=Decimal)
    except ValueError as e:
        raise ErpFeedError(url, f"non-JSON response: {text[:200]}") from e

    items = (body or {}).get("Items") if isinstance(body, dict) else None
    if items is None:
        return {}
    if not isinstance(items, dict):
        raise ErpFeedError(url, f"Items is {type(items).__name__}, expected object")

    feed: dict[str, Decimal] = {}
    skipped = 0
    for barcode, value in items.items():
        barcode = str(barcode).strip()
        amount = safe_decimal(value)
        if not barcode or amount is None:
            skipped += 1
            continue
        feed[barcode] = amount
    if skipped:
        log.warning(f"ERP: skipped {skipped} unusable entries from {url}")
    return feed


class ErpConnector:
    """Reads the ERP integration endpoints."""

    def __init__(self, settings: "Settings", client: httpx.AsyncClient | None = None):
        self.settings = settings
        self.client = client or http
        self.timeout = settings.erp_timeout_seconds
        self.max_retries = settings.erp_max_retries
        self.auth = None
        if settings.erp_username and settings.erp_password:
            self.auth = httpx.BasicAuth(settings.erp_username, settings.erp_password)

    async def fetch_feed(self, url: str) -> dict[str, Decimal]:
        last_err = None
        for attempt in range(self.max_retries + 1):
            try:
                return await self._do_fetch(url)
            except (ErpFeedError, httpx.HTTPError) as e:
                last_err = e
                if attempt < self.max_retries:
                    await asyncio.sleep(2**attempt)
                else:
                    log.warning(f"ERP feed {url} failed after {attempt + 1} attempts: {e}")
        if isinstance(last_err, ErpFeedError):
            raise last_err
        raise ErpFeedError(url, f"{type(last_err).__name__}: {last_err}") from last_err

    async def _do_fetch(self, url: str) -> dict[str, Decimal]:
        r = await self.client.get(url, auth=self.auth, timeout=self.timeout)
        if not r.is_success:
            raise ErpFeedError(url, f"HTTP {r.status_code} {r.reason_phrase}")
        feed = parse_items(url, r.text)
        log.info(f"ERP: fetched {len(feed)} items from {url}")
        return feed

    async def fetch_product_data(self) -> dict[str, SourceRecord]:
        """Prices, discounts and stock balances merged per barcode."""
        s = self.settings
        prices, discounts, stocks = await asyncio.gather(
            self.fetch_feed(s.erp_prices_url),
            self.fetch_feed(s.erp_discounts_url),
            self.fetch_feed(s.erp_stock_url),
        )
        records = merge_feeds([
            ("base_price", prices),
            ("discount_price", discounts),
            ("stock_balance", stocks),
        ])
        log.info(f"ERP: merged product data for {len(records)} barcodes")
        return records

    async def fetch_costs(self) -> dict[str, SourceRecord]:
        """Both cost feeds merged; the local-cost feed has priority."""
        s = self.settings
        costs, local_costs = await asyncio.gather(
            self.fetch_feed(s.erp_costs_url),
            self.fetch_feed(s.erp_local_costs_url),
        )
        records = merge_feeds([("cost", costs), ("cost", local_costs)])
        log.info(f"ERP: merged costs for {len(records)} barcodes")
        return records
