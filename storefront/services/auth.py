"""
Signup, login and logout.

Passwords are hashed with argon2; login issues an access token and a refresh
token signed with different secrets. The refresh token is stored on the user
and replaced on every login.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from marshmallow import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models import storage
from models.schemas.user import LoginSchema, SignupSchema
from models.user import User
from storefront.errors import Conflict, InvalidInput, NotFound, Unauthorized, join_messages
from utils.decorators import service_errors
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

signup_schema = SignupSchema()
login_schema = LoginSchema()


@dataclass
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


def token_claims(user: User) -> dict:
    return {"user_id": user.id, "email": user.email, "role": user.role.value}


def _load(schema, payload: Mapping[str, Any] | None) -> dict:
    try:
        return schema.load(payload or {})
    except ValidationError as err:
        raise InvalidInput(join_messages(err)) from err


class AuthService:
    def __init__(self, settings, tokens, revocations):
        self.settings = settings
        self.tokens = tokens
        self.revocations = revocations

    @service_errors
    def signup(self, payload: Mapping[str, Any] | None) -> User:
        data = _load(signup_schema, payload)

        session = storage.get_session()
        existing = (
            session.query(User.id)
            .filter(or_(User.email == data["email"], User.fullname == data["fullname"]))
            .first()
        )
        if existing:
            raise Conflict("User already exists")

        user = User(
            email=data["email"],
            fullname=data["fullname"],
            phone=data.get("phone"),
            address=data.get("address"),
            password_hash=hash_password(data["password"]),
        )
        storage.new(user)
        try:
            storage.save()
        except IntegrityError as exc:
            # lost a race on email, or phone already taken
            raise Conflict("User already exists") from exc

        logger.info("Created user %s", user.id)
        return user

    @service_errors
    def login(self, payload: Mapping[str, Any] | None) -> LoginResult:
        data = _load(login_schema, payload)

        session = storage.get_session()
        user = session.query(User).filter(User.email == data["email"]).first()
        if user is None:
            raise NotFound("User does not exist")

        stored_hash = session.query(User.password_hash).filter(User.id == user.id).scalar()
        if not stored_hash or not verify_password(data["password"], stored_hash):
            raise Unauthorized("Password is incorrect")

        claims = token_claims(user)
        access_token = self.tokens.issue_access(claims)
        refresh_token = self.tokens.issue_refresh(claims)

        user.refresh_token = refresh_token
        storage.save()

        logger.info("User %s logged in", user.id)
        return LoginResult(user=user, access_token=access_token, refresh_token=refresh_token)

    @service_errors
    def logout(self, token: str | None) -> bool:
        """Revoke `token` if one was presented. Returns whether anything was stored."""
        if not token:
            return False
        self.revocations.revoke(token)
        return True
