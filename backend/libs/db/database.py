"""
Database Connection Management

使用 SQLAlchemy 2.0 异步模式
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bootstrap.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy 模型基类"""

    pass


# 全局引擎和会话工厂
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url(database_url: str | None = None) -> str:
    """获取带异步驱动的数据库 URL"""
    url = database_url or settings.database_url
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """创建会话工厂"""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db() -> None:
    """初始化数据库连接"""
    global _engine, _session_factory

    url = get_database_url()
    engine_kwargs: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    # SQLite 不支持连接池大小参数
    if not url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.database_pool_size
        engine_kwargs["max_overflow"] = settings.database_max_overflow

    _engine = create_async_engine(url, **engine_kwargs)
    _session_factory = create_session_factory(_engine)


async def close_db() -> None:
    """关闭数据库连接"""
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """获取会话工厂"""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话 (用于 FastAPI 依赖注入)

    - 异常时自动回滚
    - 正常结束时自动提交
    - 会话关闭和资源清理
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            try:
                await session.commit()
            except sa_exc.PendingRollbackError as e:
                await session.rollback()
                if e.__cause__ is not None:
                    raise e.__cause__ from None  # pylint: disable=raising-non-exception
                raise
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话上下文管理器

    用于非 FastAPI 依赖注入的场景（如维护脚本）
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
