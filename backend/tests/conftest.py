import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.carconnect.clients.identity_provider import IdentityProviderError, ProviderIdentity, get_identity_provider
from backend.carconnect.db import get_db
from backend.carconnect.main import create_app
from backend.carconnect.models import Base, User
from backend.carconnect.services.seed_service import seed_database


class FakeIdentityProvider:
    def __init__(self) -> None:
        self.sessions: dict[str, ProviderIdentity] = {}

    def register(self, token: str, identity: ProviderIdentity) -> None:
        self.sessions[token] = identity

    def fetch_identity(self, session_token: str) -> ProviderIdentity:
        if session_token not in self.sessions:
            raise IdentityProviderError("session rejected status=404")
        return self.sessions[session_token]


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(eng, "connect")
    def _fk_on(dbapi_conn, _record):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture()
def client(db, identity_provider):
    app = create_app()

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def login(client, identity_provider, db):
    """Sign ``client`` in as a fresh or existing provider user, optionally forcing a role."""

    def _login(provider_id: str, email: str, full_name: str = "Test User", role: str | None = None) -> User:
        token = f"sess_{provider_id}"
        identity_provider.register(token, ProviderIdentity(provider_id=provider_id, email=email, full_name=full_name))
        res = client.post("/auth/session", json={"session_token": token})
        assert res.status_code == 200, res.text
        user = db.get(User, res.json()["id"])
        if role is not None:
            user.role = role
            db.commit()
        return user

    return _login


@pytest.fixture()
def seeded(db):
    seed_database(db)
    return db

