"""
Request-shape validators run before any handler touches the store.

Each ``validate_*`` either returns quietly (or with the parsed value) or
raises ``InvalidInputError``; none of them has side effects.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from api.errors import InvalidInputError

logger = logging.getLogger(__name__)

_EMAIL_ADAPTER = TypeAdapter(EmailStr)
_SPECIAL_RE = re.compile(r"[^A-Za-z0-9]")

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72
# users.email column width
MAX_EMAIL_LENGTH = 255
MAX_USER_ID = 2**63 - 1


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.strip() != ""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_user_id(raw: Any) -> int:
    """Parse a numeric user id from a path parameter."""
    text = str(raw).strip()
    # plain ASCII digits only; int() would also take "1_000" or other scripts' digits
    if not (text.isascii() and text.isdigit()):
        raise InvalidInputError("User Id is invalid")
    user_id = int(text)
    if not 0 < user_id <= MAX_USER_ID:
        raise InvalidInputError("User Id is invalid")
    return user_id


def validate_required_user_data(email: Optional[str], password: Optional[str]) -> None:
    if not _present(email) or not _present(password):
        raise InvalidInputError("Email and password are required")


def validate_partial_user_data(email: Optional[str], password: Optional[str]) -> None:
    if not _present(email) and not _present(password):
        raise InvalidInputError(
            "At least one field (email or password) must be provided to update"
        )


def validate_email(email: str) -> List[str]:
    candidate = email.strip()
    if len(candidate) > MAX_EMAIL_LENGTH:
        return [f"Email must be at most {MAX_EMAIL_LENGTH} characters long"]
    # EmailStr also accepts the "Name <addr>" form; only bare addresses are stored
    if "<" in candidate or ">" in candidate:
        return ["Email must be a valid email"]
    try:
        _EMAIL_ADAPTER.validate_python(candidate)
    except ValidationError:
        return ["Email must be a valid email"]
    return []


def validate_password_strength(password: str) -> List[str]:
    problems = []
    if (
        len(password) < MIN_PASSWORD_LENGTH
        or not re.search(r"[A-Z]", password)
        or not re.search(r"[a-z]", password)
        or not re.search(r"[0-9]", password)
        or not _SPECIAL_RE.search(password)
    ):
        problems.append(
            "Password must be at least 8 characters long and include uppercase, "
            "lowercase, number, and a special character"
        )
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        problems.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return problems


def validate_registration(email: Optional[str], password: Optional[str]) -> None:
    """Presence, email format and password strength for a new account."""
    validate_required_user_data(email, password)
    problems = validate_email(email) + validate_password_strength(password)
    if problems:
        logger.debug("Registration rejected: %s", problems)
        raise InvalidInputError("Validation failed", details=problems)


def validate_login(email: Optional[str], password: Optional[str]) -> None:
    """Presence and email format only; strength is never checked at login."""
    validate_required_user_data(email, password)
    problems = validate_email(email)
    if problems:
        raise InvalidInputError("Validation failed", details=problems)
