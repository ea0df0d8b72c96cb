"""Denylist of access tokens presented at logout."""
from __future__ import annotations

import logging
from datetime import datetime

from models import storage
from models.base_model import utcnow
from models.revoked_token import RevokedToken, token_digest
from utils.decorators import service_errors
from utils.security import read_unverified_expiry

logger = logging.getLogger(__name__)


class RevocationStore:
    @service_errors
    def revoke(self, token: str) -> RevokedToken:
        """Record `token` as revoked. No signature check; any string is accepted."""
        entry = RevokedToken(token=token, expires_at=read_unverified_expiry(token))
        storage.new(entry)
        storage.save()
        return entry

    @service_errors
    def is_revoked(self, token: str) -> bool:
        session = storage.get_session()
        match = (
            session.query(RevokedToken.id)
            .filter(RevokedToken.token_digest == token_digest(token), RevokedToken.token == token)
            .first()
        )
        return match is not None

    @service_errors
    def purge_expired(self, now: datetime | None = None) -> int:
        """Delete entries whose token has already expired on its own."""
        cutoff = now or utcnow()
        session = storage.get_session()
        removed = (
            session.query(RevokedToken)
            .filter(RevokedToken.expires_at.isnot(None), RevokedToken.expires_at < cutoff)
            .delete(synchronize_session=False)
        )
        storage.save()
        logger.info("Purged %d expired revoked tokens", removed)
        return removed
