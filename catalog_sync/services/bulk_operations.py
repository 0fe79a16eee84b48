"""Bulk operation pipeline — stage, upload, run.

Large change sets go to Shopify as a JSONL file rather than one mutation
per record:

  1. stagedUploadsCreate       ask for an upload target (BULK_MUTATION_VARIABLES)
  2. serialize                 one {"input": {...}} line per change record
  3. multipart POST            replay the target's parameters verbatim, file last
  4. bulkOperationRunMutation  per-kind mutation + the staged "key" parameter
  5. userErrors                fatal, full payload in the exception
  6. return the handle         never polled here

Each submission is strictly sequential and aborts on the first failure.
Different change kinds are independent submissions; the pipeline does
no cross-kind batching.
"""

import json
import logging
from dataclasses import dataclass, field

import httpx

from ..connectors.graphql_queries import (
    BULK_OPERATION_RUN,
    COST_UPDATE_MUTATION,
    CURRENT_BULK_OPERATION,
    PRICE_UPDATE_MUTATION,
    STAGED_UPLOADS_CREATE,
    STATUS_UPDATE_MUTATION,
)
from ..connectors.shopify import ShopifyTransport
from ..errors import GraphQLUserError, SyncError, UploadFailure
from ..models import BulkOperationHandle, BulkOperationStatus

log = logging.getLogger(__name__)

JSONL_MIME = "text/jsonl"

# change kind -> (mutation document, upload filename)
BULK_MUTATIONS = {
    "prices": (PRICE_UPDATE_MUTATION, "price-updates.jsonl"),
    "statuses": (STATUS_UPDATE_MUTATION, "status-updates.jsonl"),
    "costs": (COST_UPDATE_MUTATION, "bulk-update-costs.jsonl"),
}


@dataclass
class StagedTarget:
    url: str
    resource_url: str | None = None
    parameters: list[tuple[str, str]] = field(default_factory=list)

    @property
    def key(self) -> str:
        """The staged path bulkOperationRunMutation expects."""
        for name, value in self.parameters:
            if name == "key":
                return value
        raise SyncError("Staged upload target has no 'key' parameter")


def serialize_jsonl(records) -> str:
    """One JSON object per line, shaped {"input": <mutation fields>}."""
    return "\n".join(json.dumps({"input": r.to_input()}) for r in records)


def _user_errors(payload: dict | None, operation: str) -> None:
    errors = (payload or {}).get("userErrors") or []
    if errors:
        raise GraphQLUserError(operation, errors)


class BulkOperationPipeline:
    def __init__(self, transport: ShopifyTransport, client: httpx.AsyncClient | None = None,
                 upload_timeout: float = 120.0):
        self.transport = transport
        self.client = client or transport.client
        self.upload_timeout = upload_timeout

    async def submit(self, records: list, mutation: str, filename: str) -> BulkOperationHandle:
        if not records:
            raise ValueError("submit() needs at least one change record")
        log.info(f"Preparing bulk mutation for {len(records)} records ({filename})")

        target = await self.stage(filename)
        key = target.key
        payload = serialize_jsonl(records)
        await self.upload(target, filename, payload)
        log.info(f"Uploaded {filename} ({len(payload)} bytes) to staged target")

        handle = await self.run(mutation, key)
        log.info(f"Bulk mutation {handle.id} started for {filename} (status {handle.status})")
        return handle

    async def stage(self, filename: str) -> StagedTarget:
        body = await self.transport.execute(STAGED_UPLOADS_CREATE, {
            "input": [{
                "resource": "BULK_MUTATION_VARIABLES",
                "filename": filename,
                "mimeType": JSONL_MIME,
                "httpMethod": "POST",
            }]
        })
        payload = (body.get("data") or {}).get("stagedUploadsCreate")
        _user_errors(payload, "stagedUploadsCreate")
        targets = (payload or {}).get("stagedTargets") or []
        if not targets:
            raise SyncError("stagedUploadsCreate returned no staged targets")
        target = targets[0]
        return StagedTarget(
            url=target["url"],
            resource_url=target.get("resourceUrl"),
            parameters=[(p["name"], p["value"]) for p in target.get("parameters") or []],
        )

    async def upload(self, target: StagedTarget, filename: str, payload: str) -> None:
        try:
            r = await self.client.post(
                target.url,
                data=dict(target.parameters),
                files={"file": (filename, payload.encode("utf-8"), JSONL_MIME)},
                timeout=self.upload_timeout,
            )
        except httpx.HTTPError as e:
            raise UploadFailure(f"{type(e).__name__}: {e}") from e
        if not r.is_success:
            raise UploadFailure(r.text[:500], r.status_code)

    async def run(self, mutation: str, staged_upload_path: str) -> BulkOperationHandle:
        body = await self.transport.execute(
            BULK_OPERATION_RUN,
            {"mutation": mutation, "stagedUploadPath": staged_upload_path},
            idempotent=False,
        )
        payload = (body.get("data") or {}).get("bulkOperationRunMutation")
        _user_errors(payload, "bulkOperationRunMutation")
        op = (payload or {}).get("bulkOperation")
        if not op:
            raise SyncError("bulkOperationRunMutation returned no bulk operation")
        return BulkOperationHandle(id=op["id"], status=op["status"])

    async def current_operation(self) -> BulkOperationStatus | None:
        """One read of the shop's current bulk mutation; no polling."""
        body = await self.transport.execute(CURRENT_BULK_OPERATION)
        op = (body.get("data") or {}).get("currentBulkOperation")
        if not op:
            return None
        object_count = op.get("objectCount")
        return BulkOperationStatus(
            id=op["id"],
            status=op["status"],
            error_code=op.get("errorCode"),
            object_count=int(object_count) if object_count is not None else None,
            url=op.get("url"),
        )
