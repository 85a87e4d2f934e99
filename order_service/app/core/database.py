"""Database engine and sessions for Order Service"""

from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..models.base import OrderServiceBase
from .setting import OrderSettings, get_settings


def _engine_options(
    database_url: str, echo: bool, pool_size: int, max_overflow: int
) -> Dict[str, Any]:
    if database_url.startswith("sqlite"):
        # Writers wait on the file lock instead of failing fast
        return {
            "echo": echo,
            "connect_args": {"timeout": 60, "check_same_thread": False},
        }
    return {
        "echo": echo,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": 45,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


class OrderServiceDatabaseManager:
    """Owns the Order Service engine and hands out sessions."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 40,
    ) -> None:
        self.database_url = database_url
        self.async_engine = create_async_engine(
            database_url,
            **_engine_options(database_url, echo, pool_size, max_overflow),
        )
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        async with self.async_engine.begin() as conn:
            await conn.run_sync(OrderServiceBase.metadata.create_all, checkfirst=True)

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.async_session_maker() as session:
            yield session

    async def ping(self) -> bool:
        async with self.async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        await self.async_engine.dispose()


def create_database_manager(
    settings: Optional[OrderSettings] = None,
) -> OrderServiceDatabaseManager:
    """Build the Order Service database manager from settings"""
    settings = settings or get_settings()
    return OrderServiceDatabaseManager(
        database_url=settings.ORDER_DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
    )
