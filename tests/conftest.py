"""
Shared fixtures: a migrated SQLite database per test and an ASGI client.
"""

from datetime import date, timedelta

import httpx
import pytest
import pytest_asyncio

from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.service import Authenticator
from config.settings import Settings
from database.migrate import run_migrations
from database.session import build_engine, build_session_factory
from database.transactions import add_transactions
from database.users import UserStore
from main import create_app
from utils.schemas import TransactionRecord

SECRET = "test-secret-do-not-use-in-production"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        bcrypt_rounds=4,
        jwt_expiry_seconds=3600,
        request_timeout_seconds=None,
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings)
    await run_migrations(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory) -> UserStore:
    return UserStore(session_factory)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(SECRET, timedelta(hours=1))


@pytest.fixture
def authenticator(store, tokens) -> Authenticator:
    return Authenticator(store, PasswordHasher(rounds=4), tokens, timedelta(hours=1))


@pytest_asyncio.fixture
async def client(settings, engine):
    app = create_app(settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await app.state.engine.dispose()


SAMPLE_TRANSACTIONS = [
    TransactionRecord(id="1", date=date(2024, 1, 15), amount=1250.50, category="Revenue",
                      status="Paid", user_id="user_001"),
    TransactionRecord(id="2", date=date(2024, 1, 16), amount=-850.00, category="Expense",
                      status="Paid", user_id="user_002"),
    TransactionRecord(id="3", date=date(2024, 2, 3), amount=2100.75, category="Revenue",
                      status="Pending", user_id="user_001"),
    TransactionRecord(id="4", date=date(2024, 3, 9), amount=-450.25, category="Expense",
                      status="Paid", user_id="user_003"),
    TransactionRecord(id="5", date=date(2025, 1, 2), amount=-1200.50, category="Expense",
                      status="Pending", user_id="user_004",
                      user_profile="https://example.com/u/4"),
]


@pytest_asyncio.fixture
async def seeded(session_factory):
    async with session_factory() as session:
        async with session.begin():
            await add_transactions(session, SAMPLE_TRANSACTIONS)
    return SAMPLE_TRANSACTIONS
