"""
Auth API routes — register, login.

Route prefix: /auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import ConflictError, InternalError, UnauthorizedError
from auth.dependencies import db_session, get_token_issuer, login_data, registration_data
from auth.jwt import TokenIssuer
from auth.password import hash_password, verify_password
from database.helpers import create_user, get_user_by_email
from utils.schemas import CredentialsRequest, ErrorResponse, LoginResponse, RegisterResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

_INVALID_CREDENTIALS = "Invalid email or password"
# compared against when the email is unknown so both failures cost one bcrypt check
_DUMMY_HASH = hash_password("no-such-user")


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(
    req: CredentialsRequest = Depends(registration_data),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Register a new user account."""
    try:
        if await get_user_by_email(session, req.email) is not None:
            raise ConflictError("User with this email already exists")

        user = await create_user(session, req.email, hash_password(req.password))
        await session.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        await session.rollback()
        raise ConflictError("User with this email already exists")
    except SQLAlchemyError:
        logger.exception("Registration failed")
        raise InternalError("Failed to register user")

    logger.info("Registered user %s", user.id)
    return {
        "message": "User registered successfully",
        "user": {"id": user.id, "email": user.email},
    }


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def login(
    req: CredentialsRequest = Depends(login_data),
    session: AsyncSession = Depends(db_session),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Authenticate with email + password and receive a bearer token."""
    try:
        user = await get_user_by_email(session, req.email)
    except SQLAlchemyError:
        logger.exception("Login lookup failed")
        raise InternalError("Failed to login")

    password_hash = user.password_hash if user is not None else _DUMMY_HASH
    password_ok = verify_password(req.password, password_hash)
    if user is None or not password_ok:
        raise UnauthorizedError(_INVALID_CREDENTIALS)

    token = issuer.issue(user.id)
    logger.info("Login: user %s", user.id)

    return {
        "message": "Login successful",
        "user": {"id": user.id, "email": user.email},
        "token": token,
    }
