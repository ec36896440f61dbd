"""
API Dependencies - 共享 API 依赖注入

提供跨领域共享的 FastAPI 依赖：
- 数据库会话
- 服务工厂

身份认证相关依赖请使用：domains.identity.presentation.deps
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from domains.cart.application import CartUseCase
from domains.cart.infrastructure.repositories import AnonymousCartRepository, UserCartRepository
from domains.catalog.domain.interfaces import CatalogLookup
from domains.catalog.infrastructure.sqlalchemy_catalog_lookup import SQLAlchemyCatalogLookup
from domains.preference.application import PreferenceUseCase
from domains.preference.infrastructure.repositories import (
    AnonymousPreferenceRepository,
    UserPreferenceRepository,
)
from libs.db.database import get_session

__all__ = [
    "DbSession",
    "get_anonymous_cart_service",
    "get_anonymous_preference_service",
    "get_catalog_lookup",
    "get_db",
    "get_user_cart_service",
    "get_user_preference_service",
]


# =============================================================================
# 数据库会话依赖
# =============================================================================


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话"""
    async for session in get_session():
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# 服务依赖
# =============================================================================


async def get_catalog_lookup(db: DbSession) -> CatalogLookup:
    """获取目录查询"""
    return SQLAlchemyCatalogLookup(db)


async def get_anonymous_cart_service(
    db: DbSession,
    catalog: CatalogLookup = Depends(get_catalog_lookup),
) -> CartUseCase[str]:
    """获取匿名购物车服务"""
    return CartUseCase(db, AnonymousCartRepository(db), catalog)


async def get_user_cart_service(
    db: DbSession,
    catalog: CatalogLookup = Depends(get_catalog_lookup),
) -> CartUseCase[str]:
    """获取用户购物车服务"""
    return CartUseCase(db, UserCartRepository(db), catalog)


async def get_anonymous_preference_service(db: DbSession) -> PreferenceUseCase[str]:
    """获取匿名偏好服务"""
    return PreferenceUseCase(db, AnonymousPreferenceRepository(db))


async def get_user_preference_service(db: DbSession) -> PreferenceUseCase[str]:
    """获取用户偏好服务"""
    return PreferenceUseCase(db, UserPreferenceRepository(db))
