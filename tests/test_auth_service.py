import pytest

from models import storage
from models.revoked_token import RevokedToken
from models.user import Role, User
from storefront.errors import Conflict, Internal, InvalidInput, NotFound, Unauthorized
from tests.conftest import PASSWORD, stored_refresh_token

SIGNUP = {"email": "a@x.com", "fullname": "A B", "password": PASSWORD}


def _password_hash(user_id):
    return storage.get_session().query(User.password_hash).filter(User.id == user_id).scalar()


def test_signup_stores_a_hash_not_the_password(services):
    user = services.auth.signup(SIGNUP)
    assert user.role is Role.USER
    stored = _password_hash(user.id)
    assert stored and stored != PASSWORD


def test_signup_normalizes_email(services):
    user = services.auth.signup({**SIGNUP, "email": "  A@X.COM "})
    assert user.email == "a@x.com"


def test_signup_ignores_role_in_payload(services):
    user = services.auth.signup({**SIGNUP, "role": "ADMIN"})
    assert user.role is Role.USER


@pytest.mark.parametrize(
    "second",
    [
        {"email": "a@x.com", "fullname": "Someone Else", "password": PASSWORD},
        {"email": "other@x.com", "fullname": "A B", "password": PASSWORD},
    ],
)
def test_signup_conflict_on_email_or_fullname(services, second):
    services.auth.signup(SIGNUP)
    with pytest.raises(Conflict):
        services.auth.signup(second)
    assert storage.count(User) == 1


def test_signup_conflict_on_taken_phone(services):
    services.auth.signup({**SIGNUP, "phone": "+15550100"})
    with pytest.raises(Conflict):
        services.auth.signup({"email": "b@x.com", "fullname": "C D", "password": PASSWORD, "phone": "+15550100"})


def test_signup_reports_all_field_errors(services):
    with pytest.raises(InvalidInput) as info:
        services.auth.signup({"email": "nope", "password": "short"})
    message = info.value.message
    assert "email" in message and "fullname" in message and "password" in message
    assert storage.count(User) == 0


def test_login_success_overwrites_refresh_token(services, make_user):
    user = make_user(role=Role.SELLER, refresh_token="stale-refresh-token")
    result = services.auth.login({"email": "a@x.com", "password": PASSWORD})

    assert stored_refresh_token(user.id) == result.refresh_token
    assert result.refresh_token != "stale-refresh-token"

    claims = services.tokens.verify_access(result.access_token)
    assert claims["role"] == "SELLER"
    assert claims["user_id"] == user.id
    assert services.tokens.verify_refresh(result.refresh_token)["email"] == "a@x.com"


def test_login_wrong_password_issues_nothing(services, make_user):
    user = make_user()
    with pytest.raises(Unauthorized):
        services.auth.login({"email": "a@x.com", "password": "not-the-password"})
    assert stored_refresh_token(user.id) is None


def test_login_unknown_email(services):
    with pytest.raises(NotFound):
        services.auth.login({"email": "ghost@x.com", "password": PASSWORD})


def test_login_requires_fields(services):
    with pytest.raises(InvalidInput):
        services.auth.login({"email": "a@x.com"})


def test_login_result_has_no_secret(services, make_user):
    make_user()
    result = services.auth.login({"email": "a@x.com", "password": PASSWORD})
    assert "password_hash" not in result.user.to_dict()
    assert "refresh_token" not in result.user.to_dict()


def test_logout_revokes_any_string(services):
    assert services.auth.logout("definitely-not-a-jwt") is True
    assert services.revocations.is_revoked("definitely-not-a-jwt")


def test_logout_twice_adds_duplicate_rows(services):
    services.auth.logout("tok")
    services.auth.logout("tok")
    assert storage.count(RevokedToken) == 2
    assert services.revocations.is_revoked("tok")


def test_logout_without_token_stores_nothing(services):
    assert services.auth.logout(None) is False
    assert storage.count(RevokedToken) == 0


def test_unexpected_failures_become_internal(services, make_user, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("disk on fire")

    make_user()
    monkeypatch.setattr(services.tokens, "issue_access", broken)
    with pytest.raises(Internal) as info:
        services.auth.login({"email": "a@x.com", "password": PASSWORD})
    assert info.value.status_code == 500
    assert isinstance(info.value.__cause__, RuntimeError)
