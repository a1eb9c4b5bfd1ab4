import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel import select
from src.adapter.database import create_session_factory, create_store_engine, create_tables
from src.adapter.services.change_notifier import InMemoryChangeFeed
from src.depends import get_change_feed, get_change_notifier, get_clock, get_session
from src.domain.alc_transaction import AlcTransaction
from src.domain.wallet import Wallet


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a test engine on a fresh SQLite file"""
    engine = create_store_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'alc_ledger_test.db'}",
        busy_timeout_seconds=30.0,
    )
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Factory for short-lived sessions; each concurrent task needs its own"""
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Session for arranging and inspecting rows; commit or close before other sessions write"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def change_feed():
    return InMemoryChangeFeed(max_queue_size=100)


@pytest_asyncio.fixture
async def client(session_factory, frozen_clock, change_feed):
    """Create test client with the store, clock and change feed overridden"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_clock] = lambda: frozen_clock
    app.dependency_overrides[get_change_notifier] = lambda: change_feed
    app.dependency_overrides[get_change_feed] = lambda: change_feed

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def ledger_state(session_factory):
    """Read a wallet and its transactions in a throwaway session"""

    async def _read(account_id: str):
        async with session_factory() as session:
            wallet = (await session.execute(
                select(Wallet).where(Wallet.account_id == account_id)
            )).scalar_one_or_none()
            transactions = list((await session.execute(
                select(AlcTransaction)
                .where(AlcTransaction.account_id == account_id)
                .order_by(AlcTransaction.id)
            )).scalars().all())
            return wallet, transactions

    return _read
