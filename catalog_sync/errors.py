"""
errors.py — Exception types raised by the sync core

Business Rules:
- Throttling is never an exception; the transport sleeps and retries
- Transport and ERP failures are retried locally before they surface
- Everything else bubbles to the orchestrator boundary unchanged
- Unmatched barcodes are diagnostics, not errors

Called by: connectors/, services/, routers/
Depends on: nothing
"""

import json


class SyncError(Exception):
    """Base class for every failure the sync core raises."""


class TransportError(SyncError):
    """Network failure or non-2xx HTTP response from the GraphQL endpoint."""

    def __init__(self, detail: str, status_code: int | None = None):
        self.status_code = status_code
        self.detail = detail
        prefix = f"HTTP {status_code}: " if status_code else ""
        super().__init__(f"Shopify API error: {prefix}{detail}")


class RetryBudgetExhausted(TransportError):
    """The transport's retry policy ran out of attempts or time."""

    def __init__(self, attempts: int, reason: str):
        self.attempts = attempts
        super().__init__(f"gave up after {attempts} attempt(s): {reason}")


class GraphQLError(SyncError):
    """Top-level GraphQL errors array that is not a throttle signal."""

    def __init__(self, errors: list):
        self.errors = errors
        super().__init__("Shopify GraphQL error: " + json.dumps(errors))


class GraphQLUserError(SyncError):
    """A mutation payload came back with userErrors."""

    def __init__(self, operation: str, user_errors: list):
        self.operation = operation
        self.user_errors = user_errors
        super().__init__(f"{operation} rejected: {json.dumps(user_errors)}")


class UploadFailure(SyncError):
    """The staged upload target refused the JSONL file."""

    def __init__(self, detail: str, status_code: int | None = None):
        self.status_code = status_code
        self.detail = detail
        prefix = f"HTTP {status_code}: " if status_code else ""
        super().__init__(f"Failed to upload to staged target: {prefix}{detail}")


class ErpFeedError(SyncError):
    """An ERP endpoint could not be read."""

    def __init__(self, url: str, detail: str):
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch {url}: {detail}")


class BulkSubmissionError(SyncError):
    """One or more change groups failed to submit.

    ``operations`` holds the handles of the groups that did start, so the
    caller can still report them.
    """

    def __init__(self, failures: dict[str, Exception], operations: list):
        self.failures = failures
        self.operations = operations
        summary = "; ".join(f"{kind}: {err}" for kind, err in failures.items())
        super().__init__(f"Bulk submission failed for {summary}")
