#!/usr/bin/env python3
"""Run one sync outside the web process and print the JSON summary.

Same orchestrators the HTTP endpoints call, for manual runs and for
schedulers that prefer a command over an HTTP trigger.

Usage:
  DAILY PRICE/STATUS SYNC:  python scripts/run_sync.py daily
  COST UPDATE:              python scripts/run_sync.py costs
  ALTERNATE ENV FILE:       python scripts/run_sync.py daily --env /path/.env
  BOUNDED RETRIES:          python scripts/run_sync.py daily --deadline 900
"""

import argparse
import asyncio
import json
import os
import sys

# Add project root so we can import catalog_sync without installing it
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loguru import logger  # noqa: E402

from catalog_sync.config import Settings  # noqa: E402
from catalog_sync.http_client import close_clients  # noqa: E402
from catalog_sync.logging_config import setup_logging  # noqa: E402
from catalog_sync.services import sync_service  # noqa: E402

JOBS = {
    "daily": sync_service.run_daily_sync,
    "costs": sync_service.run_cost_update,
}


async def _run(job: str, settings: Settings) -> dict:
    try:
        return await JOBS[job](settings)
    finally:
        await close_clients()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sync ERP data into the Shopify catalog")
    parser.add_argument("job", choices=sorted(JOBS), help="Which sync to run")
    parser.add_argument("--env", default=".env", help="Path to .env file")
    parser.add_argument("--deadline", type=float, default=None,
                        help="Give up retrying a Shopify call after this many seconds")
    args = parser.parse_args(argv)

    settings = Settings(_env_file=args.env)
    if args.deadline is not None:
        settings.shopify_retry_deadline_seconds = args.deadline
    setup_logging(settings)

    try:
        summary = asyncio.run(_run(args.job, settings))
    except Exception as e:
        logger.exception("Sync '{}' failed: {}", args.job, e)
        print(json.dumps({"message": f"Sync '{args.job}' failed", "error": str(e)}, indent=2))
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
