"""
schemas/sync.py — Response models for the sync trigger endpoints

Field names follow the JSON the scheduler and operators already consume
(camelCase where the body always used it).

Called by: routers/sync.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class BulkOperationOut(BaseModel):
    id: str
    status: str


class UpdateCounts(BaseModel):
    prices: int = 0
    statuses: int = 0


class DailySyncResponse(BaseModel):
    message: str
    updates: UpdateCounts
    operations: list[BulkOperationOut] = Field(default_factory=list)


class CostUpdateResponse(BaseModel):
    message: str
    operation: BulkOperationOut | None = None
    updatesCount: int = 0
    notFoundBarcodes: list[str] = Field(default_factory=list)


class BulkOperationStatusResponse(BaseModel):
    id: str
    status: str
    errorCode: str | None = None
    objectCount: int | None = None
    url: str | None = None


class SyncErrorResponse(BaseModel):
    message: str
    error: str
    operations: list[BulkOperationOut] | None = None


class OkResponse(BaseModel):
    ok: bool = True
