"""
JWT-style token creation and verification.

Tokens are url-safe base64-encoded JSON payloads signed with HMAC-SHA256.
The issuer is built once at startup from ``Settings.jwt_secret``
(env var: ``JWT_SECRET``) and kept on ``app.state.token_issuer``.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    expires_at: int


class TokenIssuer:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(self, secret: str, expiry_seconds: int = 86400) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: int, now: Optional[float] = None) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        issued_at = time.time() if now is None else now
        payload = {
            "user_id": user_id,
            "exp": int(issued_at) + self.expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str, now: Optional[float] = None) -> Optional[TokenClaims]:
        """
        Verify ``token`` and return its claims.

        Returns ``None`` for malformed, tampered or expired tokens; never raises.
        """
        if not isinstance(token, str):
            return None
        parts = token.split(".", 1)
        if len(parts) != 2:
            return None
        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except ValueError:
            return None
        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            return None
        try:
            payload = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None

        user_id = payload.get("user_id")
        exp = payload.get("exp")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        if not isinstance(exp, int) or isinstance(exp, bool):
            return None
        current = time.time() if now is None else now
        if exp <= current:
            return None
        return TokenClaims(user_id=user_id, expires_at=exp)
