from __future__ import annotations

import logging
from functools import wraps

from flask import current_app, g, request
from marshmallow import Schema, ValidationError

from models import storage
from models.base_model import CastError, ModelValidationError, coerce_id
from models.user import Role, User
from storefront.errors import ApiError, Internal, UNEXPECTED_MESSAGE, Unauthorized
from utils.security import TokenError

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"

# failures the error handler already knows how to render
_KNOWN_ERRORS = (ApiError, ValidationError, CastError, ModelValidationError)


def extract_token() -> str | None:
    """accessToken cookie first, then `Authorization: Bearer <token>`."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    parts = auth.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
        return parts[1].strip()
    return None


def _resolve_user(user_id) -> User | None:
    try:
        key = coerce_id(user_id)
    except CastError:
        return None
    return storage.get(User, key)


def _role_claim(claims: dict) -> Role | None:
    try:
        return Role(claims.get("role"))
    except ValueError:
        return None


def auth_required(*roles: Role):
    """
    Allow access to authenticated users whose token role is one of `roles`.
    No roles means any authenticated user. Every rejection is a 401.
    """
    required = frozenset(roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            services = current_app.extensions["storefront"]

            token = extract_token()
            if not token:
                raise Unauthorized("You are not authorized!")

            if services.revocations.is_revoked(token):
                logger.info("Rejected revoked token on %s", request.path)
                raise Unauthorized("Token is blacklisted")

            try:
                claims = services.tokens.verify_access(token)
            except TokenError as exc:
                logger.info("Rejected token on %s: %s", request.path, exc)
                raise Unauthorized("Invalid token") from exc

            user = _resolve_user(claims.get("user_id"))
            if user is None:
                raise Unauthorized("User not found")

            if required and _role_claim(claims) not in required:
                logger.info("Role %r not allowed on %s", claims.get("role"), request.path)
                raise Unauthorized("You are not authorized")

            g.user = claims
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def validate_request(schema: Schema):
    """Reject the request before the view runs when the JSON body fails `schema`."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            payload = request.get_json(silent=True) or {}
            schema.load(payload)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def service_errors(fn):
    """Pass known errors through unchanged; wrap anything else as Internal."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except _KNOWN_ERRORS:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure in %s", fn.__qualname__)
            raise Internal(UNEXPECTED_MESSAGE) from exc

    return wrapper
