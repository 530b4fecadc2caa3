"""
Health check endpoint.

GET /health - reports the maintenance flag from the key-value store.
Rules:
- store reachable → "ok" (200), ``maintenance`` true iff the flag is "true".
- store failure → "unhealthy" (503); the gateway cannot log anyone in.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dependencies import get_kv_store
from errors import StoreUnavailableError
from infrastructure.kv.keys import MAINTENANCE_KEY
from infrastructure.kv.protocol import KeyValueStore
from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: KeyValueStore = Depends(get_kv_store)) -> JSONResponse:
    try:
        maintenance = await store.get(MAINTENANCE_KEY) == "true"
    except StoreUnavailableError:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "maintenance": False},
        )

    return JSONResponse(
        status_code=200,
        content={"status": "ok", "maintenance": maintenance},
    )
