"""Process-wide httpx client for Shopify, the staged-upload host and the ERP.

Every outbound call in one sync goes through this pool unless a client is
injected (tests, scripts). Nothing is set on the client itself: the Shopify
token header, ERP Basic auth and the per-call timeouts are all passed per
request, so the staged upload to third-party storage never carries them.
"""

import httpx

http = httpx.AsyncClient(
    timeout=30,
    limits=httpx.Limits(max_connections=20, max_keepalive_connections=10, keepalive_expiry=30),
    follow_redirects=True,
)


async def close_clients():
    """Close the pool on FastAPI shutdown or at the end of run_sync.py."""
    try:
        await http.aclose()
    except RuntimeError:
        # loop already closed under asyncio.run teardown
        pass
