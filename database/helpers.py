"""
Database helper functions — single-statement reads and writes for users
and articles.

Every helper takes the request-scoped ``AsyncSession``; committing is
left to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Article, User

logger = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    return await session.get(User, user_id)


async def create_user(session: AsyncSession, email: str, password_hash: str) -> User:
    """Insert a user row and flush so the store assigns its ``id``."""
    user = User(email=email, password_hash=password_hash)
    session.add(user)
    await session.flush()
    return user


async def list_articles_with_authors(session: AsyncSession) -> List[Dict[str, Any]]:
    """Return every article joined with its submitter's email, oldest first."""
    result = await session.execute(
        select(
            Article.id,
            Article.title,
            Article.body,
            Article.category,
            Article.submitted_by,
            Article.created_at,
            User.email,
        )
        .join(User, Article.submitted_by == User.id)
        .order_by(Article.id)
    )
    return [dict(row._mapping) for row in result]


async def create_article(
    session: AsyncSession,
    *,
    title: str,
    body: str,
    category: str,
    submitted_by: int,
) -> Article:
    article = Article(
        title=title,
        body=body,
        category=category,
        submitted_by=submitted_by,
    )
    session.add(article)
    await session.flush()
    logger.debug("Inserted article %s for user %s", article.id, submitted_by)
    return article
