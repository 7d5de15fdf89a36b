"""
Pydantic request / response schemas for the auth, user and article routes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ═══════════════════════════════════════════════════════════════════════════════
# Users / Auth
# ═══════════════════════════════════════════════════════════════════════════════


class CredentialsRequest(BaseModel):
    """
    Body of ``/auth/register`` and ``/auth/login``.

    Both fields are optional at the schema level so the presence check in
    ``utils.validators`` can answer with its own message.
    """

    email: Optional[str] = Field(default=None, examples=["user@example.com"])
    password: Optional[str] = Field(default=None, examples=["MySecurePassword123!"])


class UserOut(BaseModel):
    id: int
    email: str


class UserDetail(UserOut):
    created_at: Optional[datetime] = None


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class LoginResponse(BaseModel):
    message: str
    user: UserOut
    token: str


# ═══════════════════════════════════════════════════════════════════════════════
# Articles
# ═══════════════════════════════════════════════════════════════════════════════


class ArticleCreateRequest(BaseModel):
    title: NonBlankStr = Field(..., max_length=255, examples=["How to Build a REST API"])
    body: NonBlankStr
    category: NonBlankStr = Field(..., max_length=100, examples=["Technology"])
    # Ignored beyond an ownership check; the submitter is the token holder.
    submitted_by: Optional[int] = None


class ArticleOut(BaseModel):
    id: int
    title: str
    body: str
    category: str
    submitted_by: int
    created_at: Optional[datetime] = None
    email: str


class ArticleCreateResponse(BaseModel):
    message: str
    article_id: int = Field(..., serialization_alias="articleId")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[str]] = None
