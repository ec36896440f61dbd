"""
Cart Repository Interface - 购物车仓储接口

匿名用户与注册用户共用同一接口，OwnerIdT 为所有者 ID 类型。
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Generic, TypeVar
import uuid

from domains.cart.domain.types import CartLine, CartLineSnapshot

OwnerIdT = TypeVar("OwnerIdT")


class CartRepository(ABC, Generic[OwnerIdT]):
    """购物车仓储接口"""

    @abstractmethod
    async def list_lines(self, owner_id: OwnerIdT, for_update: bool = False) -> list[CartLine]:
        """列出全部条目（按 added_at 降序）"""
        ...

    @abstractmethod
    async def get_line(
        self,
        owner_id: OwnerIdT,
        line_id: uuid.UUID,
        for_update: bool = False,
    ) -> CartLine | None:
        """获取单个条目"""
        ...

    @abstractmethod
    async def add_or_increment(
        self,
        owner_id: OwnerIdT,
        shop_id: uuid.UUID,
        shop_service_id: uuid.UUID,
        quantity: int,
        snapshot: CartLineSnapshot,
        added_at: datetime | None = None,
    ) -> None:
        """插入新条目，或在 (owner, shop, service) 冲突时原子累加数量

        added_at 只在插入时使用（合并时保留匿名条目的原值）。
        """
        ...

    @abstractmethod
    async def set_quantity(self, line: CartLine, quantity: int) -> CartLine:
        """设置数量并刷新 updated_at"""
        ...

    @abstractmethod
    async def delete_line(self, owner_id: OwnerIdT, line_id: uuid.UUID) -> bool:
        """删除条目，返回是否存在"""
        ...

    @abstractmethod
    async def clear(self, owner_id: OwnerIdT) -> int:
        """清空购物车，返回删除行数"""
        ...

    @abstractmethod
    async def claim_all(self, owner_id: OwnerIdT) -> list[dict[str, Any]]:
        """删除并返回全部条目（合并时使用）"""
        ...
