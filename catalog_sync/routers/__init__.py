"""
routers/ — FastAPI route modules.

Each file contains a thin APIRouter. All business logic
lives in services/. Routers authorize the caller, call services,
and return responses.
"""
