"""
JWT access and refresh tokens.

Access and refresh tokens are signed with different keys and carry a "type"
claim, so one can never be used in place of the other.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from servicedesk.config import Settings
from servicedesk.exceptions import InvalidToken

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """
    Issues and verifies signed tokens carrying a user identifier.

    Constructed once from Settings; holds the keys and expiry windows.

    Usage:
        tokens = TokenService(settings)
        pair = tokens.issue_pair(user.id)
        user_id = tokens.verify_access_token(pair.access_token)
    """

    def __init__(self, settings: Settings):
        self.access_key = settings.jwt_secret_key
        self.refresh_key = settings.jwt_refresh_secret_key
        self.algorithm = settings.jwt_algorithm
        self.access_expires = timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_expires = timedelta(minutes=settings.refresh_token_expire_minutes)

    def _encode(self, user_id: str, token_type: str, key: str, expires: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "sub": str(user_id),
            "type": token_type,
            "iat": now,
            "exp": now + expires,
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(claims, key, algorithm=self.algorithm)

    def issue_access_token(self, user_id: str) -> str:
        """Create a signed access token for user_id."""
        return self._encode(user_id, ACCESS_TOKEN_TYPE, self.access_key, self.access_expires)

    def issue_refresh_token(self, user_id: str) -> str:
        """Create a signed refresh token for user_id (separate key and expiry)."""
        return self._encode(user_id, REFRESH_TOKEN_TYPE, self.refresh_key, self.refresh_expires)

    def issue_pair(self, user_id: str) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(user_id),
            refresh_token=self.issue_refresh_token(user_id),
        )

    def verify(self, token: str, key: str, token_type: str = ACCESS_TOKEN_TYPE) -> str:
        """
        Decode and validate a token.

        Args:
            token: Encoded JWT string.
            key: Signing key to verify against.
            token_type: Expected "type" claim.

        Returns:
            The user id stored in the subject claim.

        Raises:
            InvalidToken: If the signature, expiry, type or subject check fails.
        """
        if not token:
            raise InvalidToken()
        try:
            payload = jwt.decode(token, key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken() from exc

        if payload.get("type") != token_type:
            raise InvalidToken()

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidToken()
        return user_id

    def verify_access_token(self, token: str) -> str:
        return self.verify(token, self.access_key, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> str:
        return self.verify(token, self.refresh_key, REFRESH_TOKEN_TYPE)

    def refresh(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new access token.

        The refresh token itself is not rotated or revoked; it stays valid
        until its own expiry.
        """
        user_id = self.verify_refresh_token(refresh_token)
        return self.issue_access_token(user_id)
