"""
Protected asset endpoint.

GET {asset_route} - raw asset bytes for valid sessions only. Responses are
never cacheable, so an expired or revoked session cannot be served a copy
held by an intermediate cache.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from dependencies import get_asset_service, get_current_session
from schemas.models.session import SessionClaims
from services.asset_service import ProtectedAssetService


def create_asset_router(asset_route: str) -> APIRouter:
    router = APIRouter(tags=["assets"])

    @router.get(asset_route, response_class=Response)
    async def serve_protected_asset(
        session: SessionClaims = Depends(get_current_session),
        assets: ProtectedAssetService = Depends(get_asset_service),
    ) -> Response:
        blob = await assets.fetch()
        return Response(
            content=blob.body,
            media_type=blob.content_type,
            headers={"Cache-Control": "no-store, max-age=0", "ETag": blob.etag},
        )

    return router
