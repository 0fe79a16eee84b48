"""
test_config.py — Tests for catalog_sync/config.py

Covers: defaults, environment overrides, the GraphQL endpoint URL,
production detection and the retry policy built from settings.

Called by: pytest
Depends on: catalog_sync.config
"""

import os
from unittest.mock import patch

from catalog_sync.config import Settings

from conftest import make_settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.app_env == "development"
    assert s.is_production is False
    assert s.shopify_api_version == "2024-07"
    assert s.shopify_max_attempts is None
    assert s.shopify_retry_deadline_seconds is None
    assert s.trusted_scheduler_header == "x-vercel-cron"


def test_environment_overrides():
    env = {
        "APP_ENV": "Production",
        "SHOPIFY_STORE_DOMAIN": "env-shop.myshopify.com",
        "SHOPIFY_MAX_ATTEMPTS": "7",
        "ERP_PRICES_URL": "https://erp.example/prices",
    }
    with patch.dict(os.environ, env):
        s = Settings(_env_file=None)
    assert s.is_production is True
    assert s.shopify_store_domain == "env-shop.myshopify.com"
    assert s.shopify_max_attempts == 7
    assert s.erp_prices_url == "https://erp.example/prices"


def test_graphql_url():
    s = make_settings(shopify_store_domain="shop.myshopify.com/", shopify_api_version="2025-01")
    assert s.shopify_graphql_url == "https://shop.myshopify.com/admin/api/2025-01/graphql.json"


def test_retry_policy_from_settings():
    policy = make_settings(
        shopify_max_attempts=4,
        shopify_retry_deadline_seconds=60,
        rate_limit_retry_seconds=2,
        throttle_margin_seconds=0.25,
    ).retry_policy()
    assert policy.max_attempts == 4
    assert policy.deadline_seconds == 60
    assert policy.rate_limit_interval == 2
    assert policy.throttle_margin == 0.25
