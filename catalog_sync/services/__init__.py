"""
services/ — Sync business logic.

reconciliation.py   pure diff of ERP truth against the catalog snapshot
bulk_operations.py  staged upload + bulkOperationRunMutation submission
sync_service.py     daily price/status sync and cost update drivers
"""
