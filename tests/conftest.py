import pytest

from models import storage
from models.user import Role, User
from storefront import create_app
from utils.security import hash_password

PASSWORD = "secret123"


@pytest.fixture
def app():
    # TestingConfig uses an in-memory SQLite database, fresh on every create_app()
    app = create_app("testing")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions["storefront"]


@pytest.fixture
def settings(services):
    return services.settings


@pytest.fixture
def make_user(app):
    def _make(email="a@x.com", fullname="A B", password=PASSWORD, role=Role.USER, **extra):
        user = User(
            email=email,
            fullname=fullname,
            password_hash=hash_password(password),
            role=role,
            **extra,
        )
        storage.new(user)
        storage.save()
        return user

    return _make


def stored_refresh_token(user_id):
    session = storage.get_session()
    return session.query(User.refresh_token).filter(User.id == user_id).scalar()
