"""
test_routers_sync.py — Tests for the sync trigger endpoints

Covers: auth on every endpoint (API key, scheduler header, development
bypass), success bodies, structured 500 bodies, partially submitted daily
sync reporting its operations, the ERP webhook, bulk status and /health.

Called by: pytest
Depends on: catalog_sync.main, catalog_sync.routers.sync
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from catalog_sync.config import get_settings
from catalog_sync.errors import BulkSubmissionError, ErpFeedError, UploadFailure
from catalog_sync.main import app

from conftest import make_settings

SVC = "catalog_sync.services.sync_service"
KEY = {"x-api-key": "test-key"}

DAILY_OK = {
    "message": "Daily sync completed successfully.",
    "updates": {"prices": 3, "statuses": 1},
    "operations": [{"id": "gid://shopify/BulkOperation/1", "status": "CREATED"}],
}


@pytest.fixture()
def client_for():
    """Build a TestClient whose settings are overridden per test."""

    def _make(**overrides):
        settings = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture()
def prod(client_for):
    return client_for(app_env="production")


# ── /health ─────────────────────────────────────────────────────────


def test_health(client_for):
    assert client_for().get("/health").json() == {"ok": True}


# ── daily sync ──────────────────────────────────────────────────────


def test_daily_sync_open_in_development(client_for):
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock, return_value=DAILY_OK) as run:
        resp = client_for(app_env="development").get("/api/cron/daily-sync")
    assert resp.status_code == 200
    assert resp.json() == DAILY_OK
    run.assert_awaited_once()


def test_daily_sync_requires_auth_in_production(prod):
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock) as run:
        resp = prod.get("/api/cron/daily-sync")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthorized"}
    run.assert_not_awaited()


def test_daily_sync_accepts_scheduler_header(prod):
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock, return_value=DAILY_OK):
        resp = prod.get("/api/cron/daily-sync", headers={"x-vercel-cron": "1"})
    assert resp.status_code == 200


def test_daily_sync_accepts_api_key(prod):
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock, return_value=DAILY_OK):
        resp = prod.get("/api/cron/daily-sync", headers=KEY)
    assert resp.status_code == 200


def test_daily_sync_wrong_key(prod):
    resp = prod.get("/api/cron/daily-sync", headers={"x-api-key": "nope"})
    assert resp.status_code == 401


def test_daily_sync_failure_body(client_for):
    err = ErpFeedError("https://erp.test/prices", "HTTP 502")
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock, side_effect=err):
        resp = client_for().get("/api/cron/daily-sync")
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Failed to run daily sync"
    assert "https://erp.test/prices" in body["error"]


def test_daily_sync_partial_submission_lists_operations(client_for):
    err = BulkSubmissionError(
        {"prices": UploadFailure("denied", 403)},
        [{"id": "gid://shopify/BulkOperation/2", "status": "CREATED"}],
    )
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock, side_effect=err):
        resp = client_for().get("/api/cron/daily-sync")
    assert resp.status_code == 500
    body = resp.json()
    assert body["operations"] == [{"id": "gid://shopify/BulkOperation/2", "status": "CREATED"}]
    assert "prices" in body["error"]


# ── cost update ─────────────────────────────────────────────────────


def test_update_costs_requires_key_even_in_development(client_for):
    with patch(f"{SVC}.run_cost_update", new_callable=AsyncMock) as run:
        resp = client_for(app_env="development").post("/api/update-costs")
    assert resp.status_code == 401
    run.assert_not_awaited()


def test_update_costs_rejects_scheduler_header(prod):
    resp = prod.post("/api/update-costs", headers={"x-vercel-cron": "1"})
    assert resp.status_code == 401


def test_update_costs_with_empty_configured_key(client_for):
    resp = client_for(internal_api_key="").post("/api/update-costs", headers={"x-api-key": ""})
    assert resp.status_code == 401


def test_update_costs_ok(client_for):
    body = {
        "message": "Cost update process started.",
        "operation": {"id": "gid://shopify/BulkOperation/3", "status": "CREATED"},
        "updatesCount": 2,
        "notFoundBarcodes": ["4600009"],
    }
    with patch(f"{SVC}.run_cost_update", new_callable=AsyncMock, return_value=body):
        resp = client_for().post("/api/update-costs", headers=KEY)
    assert resp.status_code == 200
    assert resp.json() == body


def test_update_costs_failure_body(client_for):
    with patch(f"{SVC}.run_cost_update", new_callable=AsyncMock, side_effect=RuntimeError("boom")):
        resp = client_for().post("/api/update-costs", headers=KEY)
    assert resp.status_code == 500
    assert resp.json()["message"] == "Failed to update costs"
    assert resp.json()["error"] == "boom"


# ── bulk status ─────────────────────────────────────────────────────


def test_current_bulk_operation(client_for):
    status = {"id": "op", "status": "RUNNING", "errorCode": None, "objectCount": 5, "url": None}
    with patch(f"{SVC}.get_current_bulk_operation", new_callable=AsyncMock, return_value=status):
        resp = client_for().get("/api/bulk-operations/current", headers=KEY)
    assert resp.status_code == 200
    assert resp.json() == status


def test_current_bulk_operation_none(client_for):
    with patch(f"{SVC}.get_current_bulk_operation", new_callable=AsyncMock, return_value=None):
        resp = client_for().get("/api/bulk-operations/current", headers=KEY)
    assert resp.status_code == 200
    assert resp.json() is None


# ── ERP webhook ─────────────────────────────────────────────────────


def test_erp_webhook_acknowledges(client_for):
    with patch(f"{SVC}.run_daily_sync", new_callable=AsyncMock) as run:
        resp = client_for().post("/api/webhooks/erp", headers=KEY, content=b'{"event": "price-changed"}')
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    run.assert_not_awaited()


def test_erp_webhook_requires_key(client_for):
    assert client_for().post("/api/webhooks/erp", content=b"{}").status_code == 401
