"""
RevokedToken model: access tokens presented at logout.
Fields:
- token (raw string, unbounded; not unique: logging out twice adds a second row)
- token_digest (sha256 hex of token, the indexed lookup key)
- expires_at (the token's own exp claim when readable, used for pruning)
- created_at
"""
import hashlib

from sqlalchemy import Column, DateTime, String, Text

from models.base_model import Base, BaseModel


def token_digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class RevokedToken(BaseModel, Base):
    __tablename__ = "revoked_tokens"

    token = Column(Text, nullable=False)
    token_digest = Column(String(64), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=True, index=True)

    def __init__(self, *args, **kwargs):
        if "token" in kwargs and "token_digest" not in kwargs:
            kwargs["token_digest"] = token_digest(kwargs["token"])
        super().__init__(*args, **kwargs)

    def __repr__(self):
        return f"<RevokedToken id={self.id} expires_at={self.expires_at}>"
