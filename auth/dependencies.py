"""
FastAPI dependencies for authentication and request validation.

Provides ``db_session``, ``get_token_issuer`` and ``get_current_user_id``
for protected routes, plus the validation gates that run before the
auth and user handlers.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import UnauthorizedError
from auth.jwt import TokenIssuer
from database.session import get_db_session
from utils.schemas import CredentialsRequest
from utils.validators import (
    normalize_email,
    validate_login,
    validate_registration,
    validate_user_id,
)

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> int:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id``.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")

    claims = issuer.verify(credentials.credentials)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token")
    return claims.user_id


# ── Validation gates ───────────────────────────────────────────────────


async def registration_data(req: CredentialsRequest) -> CredentialsRequest:
    validate_registration(req.email, req.password)
    return CredentialsRequest(email=normalize_email(req.email), password=req.password)


async def login_data(req: CredentialsRequest) -> CredentialsRequest:
    validate_login(req.email, req.password)
    return CredentialsRequest(email=normalize_email(req.email), password=req.password)


async def path_user_id(user_id: str) -> int:
    return validate_user_id(user_id)
