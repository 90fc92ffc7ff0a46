import sys, os

import pytest
import pytest_asyncio
import httpx
from httpx import ASGITransport

# ⚙️ Testumgebung: SQLite im Speicher, fester Key
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENCRYPTION_KEY", "11" * 32)

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.user import User
from utils.qr_save import HistoryGateway


@pytest.fixture
def session_local():
    """Frische In-Memory-Datenbank pro Test, in die App eingehängt."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield testing_session_local
    app.dependency_overrides.pop(get_db, None)
    engine.dispose()


@pytest.fixture
def db(session_local):
    session = session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway(db):
    return HistoryGateway(db)


@pytest.fixture
def make_user(db):
    def _make(username: str = "alice") -> User:
        user = User(username=username, email=f"{username}@example.com", password_hash="hash")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def client(session_local):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def logged_in_client(client):
    response = client.post(
        "/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    return client


@pytest_asyncio.fixture
async def async_client(session_local):
    """Erstellt einen asynchronen Testclient."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
