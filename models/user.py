from enum import Enum

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import deferred, validates
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel, ModelValidationError


class Role(str, Enum):
    ADMIN = "ADMIN"
    SELLER = "SELLER"
    USER = "USER"


class User(BaseModel, Base):
    __tablename__ = "users"
    __secret_fields__ = ("password_hash", "refresh_token", "otp")

    fullname = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # NULLs don't collide on unique indexes, so phone stays optional
    phone = Column(String(32), nullable=True, unique=True)
    address = Column(String(255), nullable=True)
    avatar = Column(String(512), nullable=True)
    role = Column(SAEnum(Role, name="user_role", native_enum=False), nullable=False, default=Role.USER)

    # excluded from default loads; fetch explicitly when needed
    password_hash = deferred(Column(String(255), nullable=False))
    refresh_token = deferred(Column(Text, nullable=True))
    otp = deferred(Column(Integer, nullable=True))

    @validates("email")
    def _normalize_email(self, key, value):
        value = value.strip().lower() if isinstance(value, str) else value
        if not value or "@" not in value:
            raise ModelValidationError({key: "Email is invalid"})
        return value

    @validates("fullname")
    def _normalize_fullname(self, key, value):
        value = value.strip() if isinstance(value, str) else value
        if not value:
            raise ModelValidationError({key: "Full name is required"})
        return value

    @validates("phone", "address")
    def _blank_to_none(self, key, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def __repr__(self):
        return f"<User {self.email} role={self.role}>"
