from typing import AsyncIterator
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.database import create_store_engine, create_session_factory
from src.adapter.repositories.alc_transaction_repository import SqlAlchemyAlcTransactionRepository
from src.adapter.repositories.wallet_repository import SqlAlchemyWalletRepository
from src.adapter.services.clock import SystemClock
from src.adapter.services.change_notifier import InMemoryChangeFeed, create_change_notifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.change_notifier import ChangeNotifier
from src.app.services.clock import Clock
from src.app.services.wallet_ledger import WalletLedger
from src.app.use_cases.ad_rewards.ad_reward_settings import AdRewardSettings
from src.app.use_cases.quota.quota_settings import QuotaSettings

engine = create_store_engine(
    ApplicationConfig.DB_URI,
    busy_timeout_seconds=ApplicationConfig.SQLITE_BUSY_TIMEOUT_SECONDS,
)

AsyncSessionLocal = create_session_factory(engine)

change_feed = InMemoryChangeFeed(max_queue_size=ApplicationConfig.CHANGE_FEED_QUEUE_SIZE)

change_notifier = create_change_notifier(
    feed=change_feed,
    webhook_url=ApplicationConfig.CHANGE_WEBHOOK_URL,
)

system_clock = SystemClock()

quota_settings = QuotaSettings.from_config(ApplicationConfig)

ad_reward_settings = AdRewardSettings.from_config(ApplicationConfig)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session


def get_clock() -> Clock:
    return system_clock


def get_change_notifier() -> ChangeNotifier:
    return change_notifier


def get_change_feed() -> InMemoryChangeFeed:
    return change_feed


def build_wallet_ledger(session: AsyncSession, clock: Clock) -> WalletLedger:
    return WalletLedger(
        wallet_repo=SqlAlchemyWalletRepository(session),
        transaction_repo=SqlAlchemyAlcTransactionRepository(session),
        clock=clock,
        welcome_balance=ApplicationConfig.WELCOME_BALANCE,
        uow=SqlAlchemyUnitOfWork(session),
    )
