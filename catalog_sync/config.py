"""All settings, loaded from the .env file."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .connectors.shopify import RetryPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_env: str = "development"
    log_level: str = "INFO"

    # Shopify Admin GraphQL
    shopify_store_domain: str = ""
    shopify_admin_token: str = ""
    shopify_api_version: str = "2024-07"
    shopify_timeout_seconds: float = 30

    # Page sizes
    products_page_size: int = 50
    variants_per_product: int = 100
    variants_page_size: int = 250

    # Transport retry policy (None = retry until success)
    shopify_max_attempts: int | None = None
    shopify_retry_deadline_seconds: float | None = None
    rate_limit_retry_seconds: float = 5.0
    throttle_margin_seconds: float = 0.1

    # ERP feeds
    erp_username: str = ""
    erp_password: str = ""
    erp_prices_url: str = "https://crm.prostor.ae/tst/hs/Integration/ProstorDatabasePrices"
    erp_discounts_url: str = "https://crm.prostor.ae/tst/hs/Integration/ProstorDatabaseDiscounts"
    erp_stock_url: str = "https://crm.prostor.ae/tst/hs/Integration/ProstorDatabaseStockBalances"
    # Cost feeds in ascending priority: local costs override costs
    erp_costs_url: str = "https://crm.prostor.ae/prostor/hs/Integration/AlqitharaDatabaseCosts"
    erp_local_costs_url: str = "https://crm.prostor.ae/tst/hs/Integration/ProstorDatabaseLocalCosts"
    erp_timeout_seconds: float = 30
    erp_max_retries: int = 2

    # Inbound trigger surface
    internal_api_key: str = ""
    trusted_scheduler_header: str = "x-vercel-cron"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def shopify_graphql_url(self) -> str:
        domain = self.shopify_store_domain.rstrip("/")
        return f"https://{domain}/admin/api/{self.shopify_api_version}/graphql.json"

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.shopify_max_attempts,
            deadline_seconds=self.shopify_retry_deadline_seconds,
            rate_limit_interval=self.rate_limit_retry_seconds,
            throttle_margin=self.throttle_margin_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
