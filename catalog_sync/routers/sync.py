"""
routers/sync.py — Sync trigger endpoints

Entry points for the scheduler and operators. Each endpoint authorizes
the caller, runs one orchestrator, and converts any failure into a
structured 500 body after logging it with full context.

Business Rules:
- Daily sync: scheduler marker header or API key (production only)
- Cost update, webhook and bulk status: API key always
- Failure body is {message, error}; a partially submitted daily sync also
  lists the operations that did start
- The ERP webhook only acknowledges and logs; it triggers nothing

Called by: main.py (router mount)
Depends on: services/sync_service.py, dependencies.py, config
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger

from ..config import Settings, get_settings
from ..dependencies import require_api_key, require_sync_trigger
from ..errors import BulkSubmissionError
from ..schemas.sync import (
    BulkOperationStatusResponse,
    CostUpdateResponse,
    DailySyncResponse,
    OkResponse,
    SyncErrorResponse,
)
from ..services import sync_service

router = APIRouter()

_ERRORS = {500: {"model": SyncErrorResponse}}


def _failure(message: str, e: Exception) -> JSONResponse:
    body = {"message": message, "error": str(e)}
    if isinstance(e, BulkSubmissionError):
        body["operations"] = e.operations
    return JSONResponse(body, status_code=500)


@router.get(
    "/api/cron/daily-sync",
    response_model=DailySyncResponse,
    responses=_ERRORS,
    dependencies=[Depends(require_sync_trigger)],
)
async def daily_sync(settings: Settings = Depends(get_settings)):
    try:
        return await sync_service.run_daily_sync(settings)
    except Exception as e:
        logger.exception("Failed to run daily sync: {}", e)
        return _failure("Failed to run daily sync", e)


@router.post(
    "/api/update-costs",
    response_model=CostUpdateResponse,
    responses=_ERRORS,
    dependencies=[Depends(require_api_key)],
)
async def update_costs(settings: Settings = Depends(get_settings)):
    try:
        return await sync_service.run_cost_update(settings)
    except Exception as e:
        logger.exception("Failed to update costs: {}", e)
        return _failure("Failed to update costs", e)


@router.get(
    "/api/bulk-operations/current",
    response_model=BulkOperationStatusResponse | None,
    responses=_ERRORS,
    dependencies=[Depends(require_api_key)],
)
async def current_bulk_operation(settings: Settings = Depends(get_settings)):
    try:
        return await sync_service.get_current_bulk_operation(settings)
    except Exception as e:
        logger.exception("Failed to read current bulk operation: {}", e)
        return _failure("Failed to read current bulk operation", e)


@router.post("/api/webhooks/erp", response_model=OkResponse, dependencies=[Depends(require_api_key)])
async def erp_webhook(request: Request):
    raw = await request.body()
    logger.info("ERP webhook received ({} bytes): {}", len(raw), raw[:2000].decode("utf-8", errors="replace"))
    return {"ok": True}
