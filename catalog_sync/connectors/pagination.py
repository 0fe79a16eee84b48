"""Cursor pagination over Shopify connections.

Pages are fetched one after another (each needs the previous endCursor)
and accumulated into a single list. Any transport error propagates and
the partial result is discarded.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from .shopify import ShopifyTransport

log = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of a connection: its nodes plus the pageInfo fields."""

    nodes: list = field(default_factory=list)
    has_next_page: bool = False
    end_cursor: str | None = None


def connection_page(connection: dict | None) -> Page:
    """Build a Page from a connection with pageInfo and edges or nodes."""
    connection = connection or {}
    info = connection.get("pageInfo") or {}
    if "nodes" in connection:
        nodes = list(connection.get("nodes") or [])
    else:
        nodes = [edge.get("node") for edge in connection.get("edges") or [] if edge.get("node")]
    return Page(
        nodes=nodes,
        has_next_page=bool(info.get("hasNextPage")),
        end_cursor=info.get("endCursor"),
    )


async def collect_all(
    transport: ShopifyTransport,
    query: str,
    extract_page: Callable[[dict], Page],
    variables: dict | None = None,
    label: str = "nodes",
) -> list:
    """Fetch every page of ``query`` and return all nodes in order.

    ``extract_page`` receives the response ``data`` dict and returns the
    Page for that query's connection. The cursor is bound as ``$cursor``.
    """
    nodes: list = []
    cursor = None
    has_next_page = True
    pages = 0

    while has_next_page:
        body = await transport.execute(query, {**(variables or {}), "cursor": cursor})
        page = extract_page(body.get("data") or {})
        nodes.extend(page.nodes)
        pages += 1
        if page.has_next_page and not page.end_cursor:
            raise ValueError(f"{label}: hasNextPage without endCursor on page {pages}")
        has_next_page = page.has_next_page
        cursor = page.end_cursor
        log.info(f"Fetched page {pages} of {label}, total fetched: {len(nodes)}")

    log.info(f"Finished fetching {label}. Total: {len(nodes)}")
    return nodes
