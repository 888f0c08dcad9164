import pytest
from fastapi.testclient import TestClient

from moodtracker.core.config import Settings
from moodtracker.core.security import create_access_token
from moodtracker.db.session import build_engine, build_session_factory, init_db
from moodtracker.main import create_app
from moodtracker.services import users
from moodtracker.services.factors import seed_factors

ADMIN_EMAIL = "admin@example.com"
PASSWORD = "ValidPass1"


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-secret",
        database_url="sqlite://",
        admin_emails=(ADMIN_EMAIL,),
    )


@pytest.fixture
def db(settings):
    """Session on a fresh in-memory database with the default factor catalog"""
    engine = build_engine(settings)
    init_db(engine)
    session = build_session_factory(engine)()
    seed_factors(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(username=None, email=None, password=PASSWORD):
        counter["n"] += 1
        n = counter["n"]
        result = users.create_user(
            db,
            username or f"user{n}",
            email or f"user{n}@example.com",
            password,
            admin_emails=(ADMIN_EMAIL,),
        )
        assert result.ok, result.error
        return result.data

    return _make


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


def _signup(client, username, email, password=PASSWORD):
    res = client.post("/signup", json={"username": username, "email": email, "password": password})
    assert res.status_code == 201, res.json()
    return res.json()


@pytest.fixture
def signup(client):
    def _do(username="ally", email="ally@example.com", password=PASSWORD):
        return _signup(client, username, email, password)

    return _do


@pytest.fixture
def auth_headers(signup):
    body = signup()
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def other_headers(signup):
    body = signup("bobby", "bobby@example.com")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def admin_headers(signup):
    body = signup("admin", ADMIN_EMAIL)
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def token_for(settings):
    def _token(user_id, email=None):
        return create_access_token(settings, user_id, email)

    return _token
