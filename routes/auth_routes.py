"""
Authentication endpoints - email OTP flow with signed session tokens.

POST /auth/init      send a code to a licensed email
POST /auth/verify    exchange the code for a session token (body + cookie)
POST /auth/validate  report whether the presented session is valid
POST /auth/logout    expire the session cookie
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response

from config import AppSettings
from dependencies import get_auth_service, get_optional_session, get_settings
from schemas.dto.requests.auth import AuthInitRequest, AuthVerifyRequest
from schemas.dto.responses.auth import ValidateResponse, VerifyResponse
from schemas.dto.responses.common import SuccessResponse
from schemas.models.session import SessionClaims
from services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(
    response: Response, settings: AppSettings, token: str
) -> None:
    response.set_cookie(
        key=settings.jwt.cookie_name,
        value=token,
        max_age=settings.jwt.session_ttl_seconds,
        path="/",
        secure=settings.jwt.cookie_secure,
        httponly=True,
        samesite="none",
    )


@router.post("/init", response_model=SuccessResponse)
async def auth_init(
    body: AuthInitRequest,
    auth: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    await auth.initiate(body.email)
    return SuccessResponse(success=True)


@router.post("/verify", response_model=VerifyResponse)
async def auth_verify(
    body: AuthVerifyRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: AppSettings = Depends(get_settings),
) -> VerifyResponse:
    issued = await auth.verify(body.email, body.code)
    _set_session_cookie(response, settings, issued.token)
    return VerifyResponse(valid=True, token=issued.token)


@router.post(
    "/validate", response_model=ValidateResponse, response_model_exclude_none=True
)
async def auth_validate(
    session: Optional[SessionClaims] = Depends(get_optional_session),
) -> ValidateResponse:
    if session is None:
        return ValidateResponse(valid=False)
    return ValidateResponse(valid=True, email=session.subject)


@router.post("/logout", response_model=SuccessResponse)
async def auth_logout(
    response: Response,
    settings: AppSettings = Depends(get_settings),
) -> SuccessResponse:
    response.delete_cookie(
        key=settings.jwt.cookie_name,
        path="/",
        secure=settings.jwt.cookie_secure,
        httponly=True,
        samesite="none",
    )
    return SuccessResponse(success=True)
