"""
conftest.py — Shared Test Fixtures for the catalog sync

Provides a Settings instance that never reads .env, helpers that build
real httpx.Response objects, and mock HTTP clients / transports so no
test touches the network.

Business Rules:
- No test hits Shopify or the ERP; every client is an AsyncMock
- Retry sleeps are patched out wherever a retry path is exercised
- Settings are constructed explicitly (never from the developer's .env)

Called by: all test files via pytest autodiscovery
Depends on: catalog_sync.config, catalog_sync.connectors.shopify
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from catalog_sync.config import Settings
from catalog_sync.connectors.shopify import RetryPolicy, ShopifyTransport

SHOP_URL = "https://test-shop.myshopify.com/admin/api/2024-07/graphql.json"


def make_settings(**overrides) -> Settings:
    values = dict(
        shopify_store_domain="test-shop.myshopify.com",
        shopify_admin_token="shpat_test",
        erp_username="exchange",
        erp_password="secret",
        erp_prices_url="https://erp.test/prices",
        erp_discounts_url="https://erp.test/discounts",
        erp_stock_url="https://erp.test/stock",
        erp_costs_url="https://erp.test/costs",
        erp_local_costs_url="https://erp.test/local-costs",
        internal_api_key="test-key",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def response(status_code: int = 200, json_body=None, text: str | None = None,
             url: str = SHOP_URL, method: str = "POST") -> httpx.Response:
    """A real httpx.Response bound to a request, as a client would return."""
    request = httpx.Request(method, url)
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json_body if json_body is not None else {}, request=request)


def gql(data: dict, cost: dict | None = None) -> dict:
    """A GraphQL body, optionally with a cost extension."""
    body = {"data": data}
    if cost is not None:
        body["extensions"] = {"cost": cost}
    return body


def cost_ext(requested: float, available: float, restore: float = 50.0) -> dict:
    return {
        "requestedQueryCost": requested,
        "throttleStatus": {
            "maximumAvailable": 1000.0,
            "currentlyAvailable": available,
            "restoreRate": restore,
        },
    }


def page(key: str, nodes: list, has_next: bool = False, cursor: str | None = None) -> dict:
    """A data dict holding one edges-style connection page."""
    return {
        key: {
            "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
            "edges": [{"node": n} for n in nodes],
        }
    }


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def mock_client() -> MagicMock:
    """httpx.AsyncClient stand-in; set .post / .get side effects per test."""
    client = MagicMock(spec=httpx.AsyncClient)
    client.post = AsyncMock()
    client.get = AsyncMock()
    return client


@pytest.fixture()
def transport(mock_client) -> ShopifyTransport:
    return ShopifyTransport(SHOP_URL, "shpat_test", retry_policy=RetryPolicy(), client=mock_client)


@pytest.fixture()
def mock_transport() -> MagicMock:
    """ShopifyTransport stand-in for code that only calls execute()."""
    t = MagicMock(spec=ShopifyTransport)
    t.execute = AsyncMock()
    t.client = MagicMock(spec=httpx.AsyncClient)
    t.client.post = AsyncMock()
    return t
