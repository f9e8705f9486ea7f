import os
import uuid

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from accounthub.core import db as db_module
from accounthub.core.registry import ClientRegistry
from accounthub.core.security import hash_password
from accounthub.main import app
from accounthub.models.user import User


db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and an empty client registry. Startup events do not run.
    """
    app.state.clients = ClientRegistry()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(password: str = "UserPass!23", roles: list[str] | None = None) -> tuple[User, str]:
        user = await User.create(
            username=f"user_{uuid.uuid4().hex[:6]}",
            email=f"{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
            roles=roles if roles is not None else ["user"],
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the /auth endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/auth",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


class FakeSocket:
    """Stand-in for SocketConnection that records what it is sent."""

    def __init__(self, socket_id: str | None = None):
        self.id = socket_id or uuid.uuid4().hex
        self.sent: list[tuple[str, object]] = []
        self.disconnected = False

    async def emit(self, event: str, data=None):
        self.sent.append((event, data))

    async def disconnect(self):
        self.disconnected = True

    def events(self) -> list[str]:
        return [e for e, _ in self.sent]


@pytest.fixture
def fake_socket():
    """Factory for FakeSocket instances."""
    return FakeSocket
