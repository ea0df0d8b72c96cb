from datetime import datetime, timedelta, timezone

from models import storage
from models.revoked_token import RevokedToken, token_digest
from utils.security import issue_token

SECRET = "revocation-test-secret-0123456789abcdef0123"


def _token(now, ttl):
    return issue_token({"user_id": "u"}, SECRET, ttl, now=now)


def test_revoke_records_token_expiry(services):
    now = datetime(2031, 5, 1, 12, 0, tzinfo=timezone.utc)
    entry = services.revocations.revoke(_token(now, timedelta(minutes=30)))
    assert entry.expires_at == datetime(2031, 5, 1, 12, 30)


def test_is_revoked_is_an_exact_match(services):
    services.revocations.revoke("abc")
    assert services.revocations.is_revoked("abc")
    assert not services.revocations.is_revoked("abcd")
    assert not services.revocations.is_revoked("ab")


def test_purge_only_drops_expired_entries(services):
    past = datetime.now(timezone.utc) - timedelta(days=2)
    future = datetime.now(timezone.utc)
    expired = _token(past, timedelta(hours=1))
    live = _token(future, timedelta(hours=1))

    services.revocations.revoke(expired)
    services.revocations.revoke(live)
    services.revocations.revoke("opaque-string")

    assert services.revocations.purge_expired() == 1
    assert storage.count(RevokedToken) == 2
    assert not services.revocations.is_revoked(expired)
    assert services.revocations.is_revoked(live)
    assert services.revocations.is_revoked("opaque-string")


def test_purge_command(app, services):
    past = datetime.now(timezone.utc) - timedelta(days=2)
    services.revocations.revoke(_token(past, timedelta(hours=1)))

    result = app.test_cli_runner().invoke(args=["purge-revoked-tokens"])
    assert result.exit_code == 0
    assert "Removed 1" in result.output
    assert storage.count(RevokedToken) == 0


def test_long_tokens_are_stored_and_matched(services):
    token = "t" * 5000
    entry = services.revocations.revoke(token)
    assert entry.token_digest == token_digest(token)
    assert services.revocations.is_revoked(token)
    assert not services.revocations.is_revoked(token[:-1])
