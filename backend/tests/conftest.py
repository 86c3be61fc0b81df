"""pytest configuration: in-memory database, app client and directory stub."""
from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the backend root is available on sys.path so tests can import the petvet package.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from petvet.api.v1.routes.deps import get_db, get_directory_client  # noqa: E402
from petvet.core import security  # noqa: E402
from petvet.db.base import Base  # noqa: E402
from petvet.db.session import build_engine  # noqa: E402
from petvet.main import app  # noqa: E402
from petvet.services.users import create_user  # noqa: E402
import petvet.db.models  # noqa: E402,F401

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(security, "PASSWORD_ITERATIONS", 1000)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def directory_pages():
    """
    Page number -> HTML served by the stubbed clinic directory.

    Missing pages answer 500; an httpx exception class is raised for that page instead.
    """
    return {}


@pytest.fixture
def directory_transport(directory_pages):
    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        html = directory_pages.get(page)
        if isinstance(html, type) and issubclass(html, httpx.HTTPError):
            raise html("directory did not answer", request=request)
        if html is None:
            return httpx.Response(500, text="upstream failure")
        return httpx.Response(200, text=html)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_client(session_factory, directory_transport):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def override_directory_client():
        with httpx.Client(transport=directory_transport) as client:
            yield client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_directory_client] = override_directory_client

    # One TestClient per cookie jar; lifespan is skipped so no file database is created.
    def _make() -> TestClient:
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def make_user(db):
    def _make(username: str, *, role: str = "user", type_: str = "owner", password: str = PASSWORD):
        return create_user(db, username=username, password=password, role=role, type_=type_)

    return _make


@pytest.fixture
def login_as(make_client):
    def _login(username: str, password: str = PASSWORD) -> TestClient:
        client = make_client()
        response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return client

    return _login


@pytest.fixture
def owner(make_user):
    return make_user("olive_owner")


@pytest.fixture
def other_owner(make_user):
    return make_user("oscar_owner")


@pytest.fixture
def vet(make_user):
    return make_user("vera_vet", type_="vet")


@pytest.fixture
def other_vet(make_user):
    return make_user("victor_vet", type_="vet")


@pytest.fixture
def admin(make_user):
    return make_user("ada_admin", role="admin")


@pytest.fixture
def owner_client(owner, login_as):
    return login_as(owner.username)


@pytest.fixture
def vet_client(vet, login_as):
    return login_as(vet.username)


@pytest.fixture
def admin_client(admin, login_as):
    return login_as(admin.username)
