"""
Base Repository - Repository 基类

提供按所有者（匿名用户 ID 或注册用户 ID）隔离数据的 Repository 基类。
匿名数据与注册用户数据分表存储，同一份实现通过 model_class / owner_column 参数化。
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar
import uuid

from sqlalchemy import Delete, delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

T = TypeVar("T")  # 实体类型
OwnerIdT = TypeVar("OwnerIdT")  # 所有者 ID 类型


class OwnedRepositoryBase(ABC, Generic[T, OwnerIdT]):
    """按所有者过滤的 Repository 基类

    子类需要实现：
    - model_class: 返回模型类
    - owner_column: 所有者字段名

    Example:
        class AnonymousCartRepository(SQLAlchemyCartRepository[str]):
            @property
            def model_class(self) -> type[AnonymousCartItem]:
                return AnonymousCartItem

            @property
            def owner_column(self) -> str:
                return "anonymous_user_id"
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """返回模型类"""
        ...

    @property
    @abstractmethod
    def owner_column(self) -> str:
        """所有者 ID 字段名"""
        ...

    @property
    def _owner_attr(self) -> Any:
        return getattr(self.model_class, self.owner_column)

    def _apply_owner_filter(self, query: Select, owner_id: OwnerIdT) -> Select:
        """应用所有者过滤"""
        return query.where(self._owner_attr == owner_id)

    def _insert(self) -> Any:
        """返回当前方言的 INSERT 构造（支持 ON CONFLICT）"""
        bind = self.db.get_bind()
        if bind.dialect.name == "postgresql":
            return postgresql.insert(self.model_class)
        if bind.dialect.name == "sqlite":
            return sqlite.insert(self.model_class)
        raise NotImplementedError(f"Upsert not supported for dialect: {bind.dialect.name}")

    async def find_owned(
        self,
        owner_id: OwnerIdT,
        order_by: str | None = None,
        order_desc: bool = True,
        for_update: bool = False,
    ) -> list[T]:
        """查询所有者的全部数据

        Args:
            owner_id: 所有者 ID
            order_by: 排序字段名
            order_desc: 是否降序
            for_update: 是否加行锁

        Returns:
            实体列表
        """
        query = self._apply_owner_filter(select(self.model_class), owner_id)

        if order_by and hasattr(self.model_class, order_by):
            order_column = getattr(self.model_class, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column.asc())
        if for_update:
            query = query.with_for_update()

        # 每次读取都以数据库为准，覆盖会话中可能过期的对象
        query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_owned(
        self,
        entity_id: uuid.UUID,
        owner_id: OwnerIdT,
        for_update: bool = False,
    ) -> T | None:
        """获取单个实体（同时校验所有者）

        Returns:
            实体或 None（如果不存在或不属于该所有者）
        """
        query = select(self.model_class).where(self.model_class.id == entity_id)  # type: ignore[attr-defined]
        query = self._apply_owner_filter(query, owner_id)
        if for_update:
            query = query.with_for_update()
        query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    def _delete_owned_statement(self, owner_id: OwnerIdT) -> Delete:
        return (
            delete(self.model_class)
            .where(self._owner_attr == owner_id)
            .execution_options(synchronize_session=False)
        )

    async def delete_owned(self, owner_id: OwnerIdT) -> int:
        """删除所有者的全部数据，返回删除行数"""
        result = await self.db.execute(self._delete_owned_statement(owner_id))
        return result.rowcount or 0

    async def claim_owned(self, owner_id: OwnerIdT, columns: Sequence[str]) -> list[dict[str, Any]]:
        """删除并返回所有者的全部数据（DELETE ... RETURNING）

        删除与读取在同一条语句中完成：并发的两个调用中只有一个能拿到数据。
        """
        returning = [getattr(self.model_class, name) for name in columns]
        result = await self.db.execute(self._delete_owned_statement(owner_id).returning(*returning))
        return [dict(row._mapping) for row in result.all()]


__all__ = ["OwnedRepositoryBase"]
