"""
sync_service.py — Daily price/status sync and cost update drivers

Thin orchestration: fetch both sides concurrently, reconcile, submit one
bulk operation per non-empty change kind.

Business Rules:
- ERP and catalog fetches run concurrently and share no state
- Change kinds are submitted concurrently; one failing kind does not stop
  the others, but the run is reported as failed with every started handle
- Submissions are fire-and-forget; bulk operations are not polled
- Unmatched cost barcodes are advisory: logged and returned, never fatal
- No partial rollback; a failure after a submission leaves it running

Called by: routers/sync.py, scripts/run_sync.py
Depends on: connectors/ (erp, catalog, shopify), services/ (reconciliation,
            bulk_operations), config
"""

import asyncio

import httpx
from loguru import logger

from ..config import Settings
from ..connectors.catalog import CatalogFetcher
from ..connectors.erp import ErpConnector
from ..connectors.shopify import ShopifyTransport
from ..errors import BulkSubmissionError
from ..models import BulkOperationHandle
from .bulk_operations import BULK_MUTATIONS, BulkOperationPipeline
from .reconciliation import reconcile_catalog, reconcile_costs

# How many unmatched barcodes to spell out in the log line
_UNMATCHED_LOG_LIMIT = 50


async def submit_groups(pipeline: BulkOperationPipeline, groups: dict[str, list]) -> list[BulkOperationHandle]:
    """Submit every non-empty change group concurrently.

    Raises BulkSubmissionError after all groups have finished if any of
    them failed; the error carries the handles that did start.
    """
    kinds = [kind for kind, records in groups.items() if records]
    results = await asyncio.gather(
        *(pipeline.submit(groups[kind], *BULK_MUTATIONS[kind]) for kind in kinds),
        return_exceptions=True,
    )

    operations: list[BulkOperationHandle] = []
    failures: dict[str, Exception] = {}
    for kind, result in zip(kinds, results):
        if isinstance(result, Exception):
            logger.error("Bulk submission for {} failed: {}", kind, result)
            failures[kind] = result
        elif isinstance(result, BaseException):
            raise result
        else:
            operations.append(result)

    if failures:
        raise BulkSubmissionError(failures, [op.as_dict() for op in operations])
    return operations


async def run_daily_sync(settings: Settings, client: httpx.AsyncClient | None = None) -> dict:
    """Sync variant prices / compare-at prices and product ACTIVE/DRAFT status."""
    logger.info("Starting daily sync")
    transport = ShopifyTransport.from_settings(settings, client=client)
    erp = ErpConnector(settings, client=client)
    catalog = CatalogFetcher(transport, settings)

    records, products = await asyncio.gather(
        erp.fetch_product_data(),
        catalog.fetch_products(),
    )

    result = reconcile_catalog(records, products)
    logger.info(
        "Found {} price updates and {} status updates to perform",
        len(result.price_changes), len(result.status_changes),
    )

    operations = await submit_groups(BulkOperationPipeline(transport), {
        "prices": result.price_changes,
        "statuses": result.status_changes,
    })

    logger.info("Daily sync finished successfully")
    return {
        "message": "Daily sync completed successfully.",
        "updates": {
            "prices": len(result.price_changes),
            "statuses": len(result.status_changes),
        },
        "operations": [op.as_dict() for op in operations],
    }


async def run_cost_update(settings: Settings, client: httpx.AsyncClient | None = None) -> dict:
    """Sync inventory item unit costs from the two ERP cost feeds."""
    logger.info("Starting cost update")
    transport = ShopifyTransport.from_settings(settings, client=client)
    erp = ErpConnector(settings, client=client)
    catalog = CatalogFetcher(transport, settings)

    records, variants = await asyncio.gather(
        erp.fetch_costs(),
        catalog.fetch_cost_variants(),
    )

    result = reconcile_costs(records, variants)
    unmatched = result.unmatched_barcodes
    logger.info("Found {} cost updates to perform", len(result.cost_changes))
    if unmatched:
        shown = ", ".join(unmatched[:_UNMATCHED_LOG_LIMIT])
        more = f" (+{len(unmatched) - _UNMATCHED_LOG_LIMIT} more)" if len(unmatched) > _UNMATCHED_LOG_LIMIT else ""
        logger.warning("{} barcodes not found in Shopify: {}{}", len(unmatched), shown, more)

    if not result.cost_changes:
        return {
            "message": "No cost updates required.",
            "operation": None,
            "updatesCount": 0,
            "notFoundBarcodes": unmatched,
        }

    operations = await submit_groups(BulkOperationPipeline(transport), {"costs": result.cost_changes})
    return {
        "message": "Cost update process started.",
        "operation": operations[0].as_dict(),
        "updatesCount": len(result.cost_changes),
        "notFoundBarcodes": unmatched,
    }


async def get_current_bulk_operation(settings: Settings, client: httpx.AsyncClient | None = None) -> dict | None:
    """Current bulk mutation status, read once."""
    transport = ShopifyTransport.from_settings(settings, client=client)
    status = await BulkOperationPipeline(transport).current_operation()
    if status is None:
        return None
    return {
        "id": status.id,
        "status": status.status,
        "errorCode": status.error_code,
        "objectCount": status.object_count,
        "url": status.url,
    }
