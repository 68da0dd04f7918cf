import os
import sys
import asyncio

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# A sufficiently long session secret for tests
TEST_SESSION_SECRET = "s" * 32
os.environ.setdefault("SESSION_SECRET", TEST_SESSION_SECRET)
os.environ.setdefault("DISABLE_AUTH_RATE_LIMITS", "true")
# Honour any externally provided DATABASE_URL (e.g. CI may set a file-backed DB)
# but fall back to an in-memory SQLite database so local runs remain isolated.
DEFAULT_DB_URL = os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Ensure all SQLAlchemy models are registered with the declarative Base so
# metadata.create_all creates every table when the test database is initialised.
from webhub import db, models  # noqa: E402,F401


@pytest.fixture(scope="session")
def session_loop():
    """Single event loop for all sync fixtures that need to run async DB code."""

    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def session_secret(monkeypatch):
    """Ensure a strong session secret is present for all tests."""
    monkeypatch.setenv("SESSION_SECRET", TEST_SESSION_SECRET)
    yield


@pytest.fixture(autouse=True, scope="session")
def ensure_database(session_loop):
    """Ensure the test database starts clean and honours DATABASE_URL."""

    mp = pytest.MonkeyPatch()
    desired_url = os.getenv("DATABASE_URL") or DEFAULT_DB_URL
    mp.setenv("DATABASE_URL", desired_url)

    if desired_url.startswith("sqlite") and ":memory:" not in desired_url:
        path = desired_url.split("///")[-1]
        if os.path.exists(path):
            os.remove(path)

    db.engine = None
    db.AsyncSessionLocal = None
    yield
    session_loop.run_until_complete(db.dispose_engine())
    mp.undo()


async def _reset_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.drop_all)
        await conn.run_sync(db.Base.metadata.create_all)


@pytest.fixture(autouse=True)
def reset_schema(session_loop):
    """Reset the schema before each test."""

    engine = db.engine or db.get_engine()
    session_loop.run_until_complete(_reset_schema(engine))
    yield


@pytest.fixture
async def db_session():
    async with db.AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    from httpx import ASGITransport, AsyncClient
    from webhub.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
