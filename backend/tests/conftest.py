import os

# Settings are read at import time, so the environment is fixed before the app loads
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ATTACHMENT_BACKEND"] = "memory"

import pytest

from project_catalog.core.database import Base, Database, get_db
from project_catalog.main import app
from project_catalog.api.dependencies import get_attachment_store
from project_catalog.storage import MemoryStore

# Workaround for Starlette 0.50.0 + httpx compatibility issue
# Starlette's TestClient tries to pass 'app' to httpx.Client which doesn't accept it
# We'll use httpx directly with ASGITransport as a fallback
import httpx
from httpx import ASGITransport
import asyncio

class CompatibleTestClient:
    """Compatible test client that works around httpx/Starlette version issues"""
    def __init__(self, app):
        self.app = app
        self.transport = ASGITransport(app=app)
        self.base_url = "http://testserver"
    
    def _run_async(self, coro):
        """Run async coroutine in event loop"""
        try:
            loop = asyncio.get_event_loop()
            if loop.is_closed():
                loop = asyncio.new_event_loop()
                asyncio.set_event_loop(loop)
        except RuntimeError:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)

    def request(self, method, url, **kwargs):
        async def _request():
            async with httpx.AsyncClient(transport=self.transport, base_url=self.base_url) as client:
                return await client.request(method, url, **kwargs)
        return self._run_async(_request())

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)
    
    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)
    
    def put(self, url, **kwargs):
        return self.request("PUT", url, **kwargs)
    
    def delete(self, url, **kwargs):
        return self.request("DELETE", url, **kwargs)

# Use CompatibleTestClient instead of FastAPI's TestClient to avoid version conflicts
TestClient = CompatibleTestClient


@pytest.fixture
def database():
    """Create an in-memory test database with the full schema"""
    database = Database("sqlite:///:memory:", environment="test")
    database.init_schema()
    try:
        yield database
    finally:
        Base.metadata.drop_all(bind=database.engine)
        database.dispose()


@pytest.fixture
def db(database):
    """Create a test database session"""
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def attachment_store():
    return MemoryStore()


@pytest.fixture
def client(db, attachment_store):
    """Create a test client"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_attachment_store] = lambda: attachment_store
    # Use CompatibleTestClient to avoid Starlette/httpx version conflicts
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return the auth response body"""
    def _register(username="alice", email=None, password="secret123"):
        response = client.post(
            "/auth/register",
            json={"username": username, "email": email or f"{username}@example.com", "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def alice(register):
    body = register("alice")
    return {"id": body["user"]["id"], "headers": auth_header(body["access_token"])}


@pytest.fixture
def bob(register):
    body = register("bob")
    return {"id": body["user"]["id"], "headers": auth_header(body["access_token"])}


@pytest.fixture
def create_project(client):
    """Create a project as the given user and return the response"""
    def _create(headers, title="Thermostat PID", description="A PID controller for lab thermostat", files=None, **fields):
        data = {"title": title, "description": description, **fields}
        return client.post("/projects", data=data, files=files, headers=headers)
    return _create
