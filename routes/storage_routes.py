"""
Per-user configuration storage.

POST /storage/save - store the request body (any JSON) for the session's user
GET  /storage/load - return it as ``{"config": ...}``; null before first save
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request

from config import AppSettings
from dependencies import get_current_session, get_document_service, get_settings
from errors import PayloadTooLargeError, ValidationError
from schemas.dto.responses.common import SuccessResponse
from schemas.dto.responses.storage import LoadResponse
from schemas.models.session import SessionClaims
from services.document_service import UserDocumentService

router = APIRouter(prefix="/storage", tags=["storage"])


@router.post("/save", response_model=SuccessResponse)
async def save_document(
    request: Request,
    session: SessionClaims = Depends(get_current_session),
    documents: UserDocumentService = Depends(get_document_service),
    settings: AppSettings = Depends(get_settings),
) -> SuccessResponse:
    raw = await request.body()
    if len(raw) > settings.max_content_length:
        raise PayloadTooLargeError("Document too large")
    try:
        document = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        raise ValidationError("Body must be valid JSON") from e

    await documents.save(session.subject, document)
    return SuccessResponse(success=True)


@router.get("/load", response_model=LoadResponse)
async def load_document(
    session: SessionClaims = Depends(get_current_session),
    documents: UserDocumentService = Depends(get_document_service),
) -> LoadResponse:
    return LoadResponse(config=await documents.load(session.subject))
