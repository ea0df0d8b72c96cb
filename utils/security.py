"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT issue/verify via PyJWT; the caller supplies the secret so the same
  functions serve access and refresh tokens
- TokenService binding each token kind to its own secret and lifetime
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Mapping

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

if TYPE_CHECKING:
    from storefront.config import AuthSettings

# default argon2 parameters; not configurable per deployment
ph = PasswordHasher()


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpired(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class MalformedToken(TokenError):
    pass


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2 hash (constant time).
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def issue_token(
    claims: Mapping[str, Any],
    secret: str,
    ttl: timedelta,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """Sign claims plus iat/exp. Same inputs and `now` give the same token."""
    issued = now or _now()
    payload = dict(claims)
    payload["iat"] = int(issued.timestamp())
    payload["exp"] = int((issued + ttl).timestamp())
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Decode and validate a JWT.
    Raises TokenExpired, InvalidSignature or MalformedToken.
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired("Token expired") from None
    # InvalidSignatureError subclasses DecodeError, keep it first
    except jwt.InvalidSignatureError:
        raise InvalidSignature("Signature verification failed") from None
    except jwt.InvalidTokenError as exc:
        raise MalformedToken(f"Invalid token: {exc}") from None


def read_unverified_expiry(token: str) -> datetime | None:
    """Best-effort read of the exp claim as naive UTC; None when unreadable."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


class TokenService:
    def __init__(self, settings: "AuthSettings"):
        self.settings = settings

    def issue_access(self, claims: Mapping[str, Any], now: datetime | None = None) -> str:
        s = self.settings
        return issue_token(claims, s.access_secret, s.access_ttl, s.algorithm, now=now)

    def issue_refresh(self, claims: Mapping[str, Any], now: datetime | None = None) -> str:
        s = self.settings
        return issue_token(claims, s.refresh_secret, s.refresh_ttl, s.algorithm, now=now)

    def verify_access(self, token: str) -> Dict[str, Any]:
        return verify_token(token, self.settings.access_secret, self.settings.algorithm)

    def verify_refresh(self, token: str) -> Dict[str, Any]:
        return verify_token(token, self.settings.refresh_secret, self.settings.algorithm)
