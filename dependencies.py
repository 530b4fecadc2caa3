"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived objects are built once in the app
lifespan and read back from app.state.

Session tokens are read from the session cookie first, then from an
``Authorization: Bearer`` header.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from config import AppSettings
from errors import AuthenticationError
from infrastructure.kv.protocol import KeyValueStore
from schemas.models.session import SessionClaims
from services.asset_service import ProtectedAssetService
from services.auth_service import AuthService
from services.document_service import UserDocumentService
from services.token_service import TokenService


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_kv_store(request: Request) -> KeyValueStore:
    return request.app.state.kv_store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_asset_service(request: Request) -> ProtectedAssetService:
    return request.app.state.asset_service


def get_document_service(request: Request) -> UserDocumentService:
    return request.app.state.document_service


def extract_session_token(request: Request, cookie_name: str) -> Optional[str]:
    token = request.cookies.get(cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme == "Bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_optional_session(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[SessionClaims]:
    """Claims for a valid session, or None. Never raises."""
    return tokens.verify(extract_session_token(request, settings.jwt.cookie_name))


def get_current_session(
    session: Optional[SessionClaims] = Depends(get_optional_session),
) -> SessionClaims:
    """Claims for a valid session; any token problem is a bare 401."""
    if session is None:
        raise AuthenticationError("Unauthorized")
    return session
