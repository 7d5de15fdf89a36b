"""
REST API routes — articles and user lookup.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import ForbiddenError, InternalError, NotFoundError
from auth.dependencies import db_session, get_current_user_id, path_user_id
from database.helpers import create_article, get_user_by_id, list_articles_with_authors
from utils.schemas import (
    ArticleCreateRequest,
    ArticleCreateResponse,
    ArticleOut,
    ErrorResponse,
    UserDetail,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/articles",
    response_model=List[ArticleOut],
    tags=["Articles"],
    responses={500: {"model": ErrorResponse}},
)
async def get_articles(
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """Get all articles with author information."""
    try:
        return await list_articles_with_authors(session)
    except SQLAlchemyError:
        logger.exception("Listing articles failed")
        raise InternalError("Failed to fetch articles")


@router.post(
    "/articles",
    response_model=ArticleCreateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Articles"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def post_article(
    req: ArticleCreateRequest,
    session: AsyncSession = Depends(db_session),
    auth_user_id: int = Depends(get_current_user_id),
) -> Dict[str, Any]:
    """
    Create a new article submitted by the authenticated user.

    ``submitted_by`` may be omitted; when given it must match the token's
    user id.
    """
    if req.submitted_by is not None and req.submitted_by != auth_user_id:
        logger.warning(
            "User %s tried to submit an article as user %s", auth_user_id, req.submitted_by
        )
        raise ForbiddenError("Cannot submit articles on behalf of another user")

    try:
        article = await create_article(
            session,
            title=req.title,
            body=req.body,
            category=req.category,
            submitted_by=auth_user_id,
        )
        await session.commit()
    except SQLAlchemyError:
        logger.exception("Creating article failed")
        raise InternalError("Failed to create article")

    logger.info("Article %s created by user %s", article.id, auth_user_id)
    return {"message": "Article created successfully", "article_id": article.id}


@router.get(
    "/users/{user_id}",
    response_model=UserDetail,
    tags=["Users"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_user(
    user_id: int = Depends(path_user_id),
    session: AsyncSession = Depends(db_session),
    auth_user_id: int = Depends(get_current_user_id),
) -> Dict[str, Any]:
    """Fetch a user's public profile (never the password hash)."""
    try:
        user = await get_user_by_id(session, user_id)
    except SQLAlchemyError:
        logger.exception("User lookup failed")
        raise InternalError("Failed to fetch user")

    if user is None:
        raise NotFoundError("User not found")
    return {"id": user.id, "email": user.email, "created_at": user.created_at}


@router.get("/health", tags=["Health"])
async def health() -> Dict[str, str]:
    return {"status": "ok"}
