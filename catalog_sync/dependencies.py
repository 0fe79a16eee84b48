"""
dependencies.py — Shared FastAPI Dependencies

Caller checks for the sync trigger endpoints. These are deliberately
thin: a shared-secret header and a trusted-scheduler marker header.

Business Rules:
- require_api_key raises 401 unless x-api-key equals INTERNAL_API_KEY
- require_sync_trigger also accepts the trusted scheduler header, and is
  only enforced in production (development runs are open)
- An empty INTERNAL_API_KEY never matches anything

Called by: routers/sync.py
Depends on: config
"""

import hmac

from fastapi import Depends, HTTPException, Request

from .config import Settings, get_settings


def _api_key_ok(request: Request, settings: Settings) -> bool:
    supplied = request.headers.get("x-api-key") or ""
    expected = settings.internal_api_key
    return bool(expected) and hmac.compare_digest(supplied, expected)


def require_api_key(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Dependency: raises 401 unless the shared secret header matches."""
    if not _api_key_ok(request, settings):
        raise HTTPException(401, "Unauthorized")


def require_sync_trigger(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Dependency: scheduler marker or shared secret, production only."""
    if not settings.is_production:
        return
    if request.headers.get(settings.trusted_scheduler_header):
        return
    if not _api_key_ok(request, settings):
        raise HTTPException(401, "Unauthorized")
