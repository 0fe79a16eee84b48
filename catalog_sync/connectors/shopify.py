"""Shopify Admin GraphQL transport — cost-aware retry wrapper.

Every response may carry a cost-accounting extension:

    extensions.cost = {
        requestedQueryCost,
        throttleStatus: {currentlyAvailable, restoreRate},
    }

When the requested cost exceeds what the bucket currently holds, the
transport sleeps long enough for the bucket to refill (plus a small
margin) and sends the same request again. HTTP 429, THROTTLED GraphQL
errors, 5xx responses and network errors are retried after a fixed
interval. Anything else waits the same interval and is raised. Calls
marked non-idempotent are resent only after 429 or THROTTLED.

Retries are unbounded unless the RetryPolicy sets max_attempts or
deadline_seconds; callers needing bounded latency must set one.

Usage:
    transport = ShopifyTransport.from_settings(settings)
    body = await transport.execute(query, {"cursor": None})
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from ..errors import GraphQLError, RetryBudgetExhausted, SyncError, TransportError
from ..http_client import http

if TYPE_CHECKING:
    from ..config import Settings

log = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Bounds for the transport's retry loop. None means no bound."""

    max_attempts: int | None = None
    deadline_seconds: float | None = None
    rate_limit_interval: float = 5.0
    throttle_margin: float = 0.1

    def check(self, attempts: int, started: float, reason: str) -> None:
        """Raise RetryBudgetExhausted if another attempt is not allowed."""
        if self.max_attempts is not None and attempts >= self.max_attempts:
            raise RetryBudgetExhausted(attempts, reason)
        if self.deadline_seconds is not None and time.monotonic() - started >= self.deadline_seconds:
            raise RetryBudgetExhausted(attempts, reason)


def throttle_delay(cost: dict, margin: float = 0.1) -> float:
    """Seconds to wait before the bucket can pay for this query.

    Returns 0.0 when the bucket already covers the requested cost.
    requested=100, available=50, restoreRate=50 -> 1.0s + margin.
    """
    bucket = cost.get("throttleStatus") or {}
    requested = cost.get("requestedQueryCost", cost.get("requestedCost")) or 0
    available = bucket.get("currentlyAvailable") or 0
    shortfall = requested - available
    if shortfall <= 0:
        return 0.0
    # A bucket that never restores would wait forever; treat as 1 point/s.
    restore_rate = bucket.get("restoreRate") or 1
    return shortfall / restore_rate + margin


def _is_throttled(errors: list) -> bool:
    for err in errors:
        code = ((err or {}).get("extensions") or {}).get("code", "")
        if str(code).upper() == "THROTTLED":
            return True
    return False


class _RetryableError(TransportError):
    """Transient failure; the request may or may not have been executed."""


class _RateLimitedError(_RetryableError):
    """429 or THROTTLED; Shopify rejected the request without executing it."""


class ShopifyTransport:
    """Sends one GraphQL document at a time to the Shopify Admin API."""

    def __init__(
        self,
        url: str,
        access_token: str,
        retry_policy: RetryPolicy | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.url = url
        self.access_token = access_token
        self.retry_policy = retry_policy or RetryPolicy()
        self.client = client or http
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: "Settings", client: httpx.AsyncClient | None = None) -> "ShopifyTransport":
        return cls(
            url=settings.shopify_graphql_url,
            access_token=settings.shopify_admin_token,
            retry_policy=settings.retry_policy(),
            client=client,
            timeout=settings.shopify_timeout_seconds,
        )

    async def execute(self, query: str, variables: dict | None = None, idempotent: bool = True) -> dict:
        """Run a query or mutation, returning the full JSON body.

        When a successful response reports a cost shortfall and the call is
        not idempotent (it started server-side work), the shortfall is slept
        off but the response is returned instead of being sent again.
        Such calls are also never resent after a network error or 5xx,
        since Shopify may already have run them; only 429 and THROTTLED
        rejections are retried.
        """
        policy = self.retry_policy
        started = time.monotonic()
        attempts = 0

        while True:
            attempts += 1
            try:
                body = await self._send(query, variables)
            except _RetryableError as e:
                if not idempotent and not isinstance(e, _RateLimitedError):
                    log.error(f"Shopify {e.detail} on a non-idempotent call, not resending")
                    await asyncio.sleep(policy.rate_limit_interval)
                    raise
                policy.check(attempts, started, e.detail)
                log.warning(f"Shopify {e.detail} - retrying in {policy.rate_limit_interval}s (attempt {attempts})")
                await asyncio.sleep(policy.rate_limit_interval)
                continue
            except SyncError as e:
                log.error(f"Shopify call failed: {e}")
                await asyncio.sleep(policy.rate_limit_interval)
                raise

            cost = (body.get("extensions") or {}).get("cost")
            if not cost:
                return body

            delay = throttle_delay(cost, policy.throttle_margin)
            if delay <= 0:
                return body

            if not idempotent:
                log.info(f"Bucket short after non-idempotent call, waiting {delay * 1000:.2f}ms before returning")
                await asyncio.sleep(delay)
                return body

            policy.check(attempts, started, "query cost exceeds available budget")
            log.info(f"Throttled, waiting {delay * 1000:.2f}ms")
            await asyncio.sleep(delay)

    async def _send(self, query: str, variables: dict | None) -> dict:
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
        }
        try:
            r = await self.client.post(
                self.url,
                json={"query": query, "variables": variables or {}},
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TransportError as e:
            raise _RetryableError(f"connection error ({type(e).__name__}: {e})") from e

        if r.status_code == 429:
            raise _RateLimitedError("rate limited", 429)
        if r.status_code >= 500:
            raise _RetryableError(f"server error {r.text[:200]}", r.status_code)
        if not r.is_success:
            raise TransportError(f"{r.reason_phrase} - {r.text[:500]}", r.status_code)

        try:
            body = r.json()
        except ValueError as e:
            raise TransportError(f"non-JSON response: {r.text[:200]}", r.status_code) from e

        errors = body.get("errors")
        if errors:
            if _is_throttled(errors):
                raise _RateLimitedError("THROTTLED")
            raise GraphQLError(errors)
        return body
