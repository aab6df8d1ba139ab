import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from signal_league.config import settings
from signal_league.storage.models import Base

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT = 30  # seconds a writer waits on a locked SQLite file


def engine_options(database_url: str) -> dict:
    """Engine kwargs sized for one session per concurrently scored group."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return {"connect_args": {"timeout": SQLITE_BUSY_TIMEOUT}}
    return {
        "pool_pre_ping": True,
        "pool_size": max(5, settings.recalc_concurrency),
        "max_overflow": 2,
    }


engine = create_async_engine(
    settings.database_url, echo=False, **engine_options(settings.database_url)
)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready (%s)", make_url(settings.database_url).get_backend_name())
