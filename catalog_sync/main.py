"""
Catalog Sync — ERP prices, availability and costs into Shopify.

FastAPI app exposing the sync trigger endpoints. Logging is configured
on startup; the shared httpx client is closed on shutdown.

Run:
    uvicorn catalog_sync.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import get_settings
from .http_client import close_clients
from .logging_config import setup_logging
from .routers import sync


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings)
    if not settings.shopify_store_domain or not settings.shopify_admin_token:
        logger.warning("SHOPIFY_STORE_DOMAIN or SHOPIFY_ADMIN_TOKEN not set; syncs will fail")
    yield
    await close_clients()


app = FastAPI(title="Catalog Sync", version=__version__, lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.get("/health")
async def health():
    return {"ok": True}


app.include_router(sync.router)
