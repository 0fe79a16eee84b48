"""
test_pagination.py — Tests for cursor pagination

Covers: connection_page for edges and nodes shapes, multi-page
accumulation with cursor threading, extra variables, error propagation.

Called by: pytest
Depends on: catalog_sync.connectors.pagination
"""

import pytest

from catalog_sync.connectors.pagination import Page, collect_all, connection_page
from catalog_sync.errors import TransportError

from conftest import gql, page


def _items_page(data: dict) -> Page:
    return connection_page(data.get("items"))


def test_connection_page_edges():
    p = connection_page(page("items", [{"id": 1}, {"id": 2}], True, "c1")["items"])
    assert p.nodes == [{"id": 1}, {"id": 2}]
    assert p.has_next_page is True
    assert p.end_cursor == "c1"


def test_connection_page_nodes_shape():
    p = connection_page({"nodes": [{"id": "a"}], "pageInfo": {"hasNextPage": False, "endCursor": None}})
    assert p.nodes == [{"id": "a"}]
    assert p.has_next_page is False


def test_connection_page_missing_connection():
    p = connection_page(None)
    assert p.nodes == []
    assert p.has_next_page is False


@pytest.mark.asyncio
async def test_collects_all_pages_in_order(mock_transport):
    mock_transport.execute.side_effect = [
        gql(page("items", [{"id": 1}, {"id": 2}], True, "c1")),
        gql(page("items", [{"id": 3}], True, "c2")),
        gql(page("items", [{"id": 4}], False, "c3")),
    ]
    nodes = await collect_all(mock_transport, "query", _items_page, variables={"first": 2})

    assert [n["id"] for n in nodes] == [1, 2, 3, 4]
    cursors = [call.args[1]["cursor"] for call in mock_transport.execute.await_args_list]
    assert cursors == [None, "c1", "c2"]
    assert all(call.args[1]["first"] == 2 for call in mock_transport.execute.await_args_list)


@pytest.mark.asyncio
async def test_single_empty_page(mock_transport):
    mock_transport.execute.return_value = gql(page("items", []))
    assert await collect_all(mock_transport, "query", _items_page) == []
    assert mock_transport.execute.await_count == 1


@pytest.mark.asyncio
async def test_transport_error_discards_progress(mock_transport):
    mock_transport.execute.side_effect = [
        gql(page("items", [{"id": 1}], True, "c1")),
        TransportError("boom", 400),
    ]
    with pytest.raises(TransportError):
        await collect_all(mock_transport, "query", _items_page)


@pytest.mark.asyncio
async def test_has_next_without_cursor_is_rejected(mock_transport):
    mock_transport.execute.return_value = gql(page("items", [{"id": 1}], True, None))
    with pytest.raises(ValueError):
        await collect_all(mock_transport, "query", _items_page)
