"""
SQLAlchemy Cart Repository - 购物车仓储实现

同一实现按 model_class / owner_column 参数化，分别服务匿名购物车与用户购物车。
"""

from datetime import datetime
from typing import Any, TypeVar
import uuid

from sqlalchemy import delete

from domains.cart.domain.repositories.cart_repository import CartRepository
from domains.cart.domain.types import CartLine, CartLineSnapshot
from domains.cart.infrastructure.models.cart_item import (
    SNAPSHOT_FIELDS,
    AnonymousCartItem,
    CartItemMixin,
    UserCartItem,
)
from libs.db.base_repository import OwnedRepositoryBase
from libs.orm.base import generate_uuid, utc_now

OwnerIdT = TypeVar("OwnerIdT")

# 合并时从匿名条目取出的字段
CLAIM_COLUMNS = ("shop_id", "shop_service_id", "quantity", "added_at", *SNAPSHOT_FIELDS)


class SQLAlchemyCartRepository(OwnedRepositoryBase[CartItemMixin, OwnerIdT], CartRepository[OwnerIdT]):
    """购物车仓储的 SQLAlchemy 实现"""

    async def list_lines(self, owner_id: OwnerIdT, for_update: bool = False) -> list[CartLine]:
        return await self.find_owned(
            owner_id,
            order_by="added_at",
            order_desc=True,
            for_update=for_update,
        )

    async def get_line(
        self,
        owner_id: OwnerIdT,
        line_id: uuid.UUID,
        for_update: bool = False,
    ) -> CartLine | None:
        return await self.get_owned(line_id, owner_id, for_update=for_update)

    async def add_or_increment(
        self,
        owner_id: OwnerIdT,
        shop_id: uuid.UUID,
        shop_service_id: uuid.UUID,
        quantity: int,
        snapshot: CartLineSnapshot,
        added_at: datetime | None = None,
    ) -> None:
        """INSERT ... ON CONFLICT DO UPDATE

        冲突时只累加数量并刷新 updated_at，已有条目的快照与 added_at 保持不变。
        """
        now = utc_now()
        stmt = self._insert().values(
            id=generate_uuid(),
            shop_id=shop_id,
            shop_service_id=shop_service_id,
            quantity=quantity,
            added_at=added_at or now,
            updated_at=now,
            **{self.owner_column: owner_id},
            **self._snapshot_values(snapshot),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[self.owner_column, "shop_id", "shop_service_id"],
            set_={
                "quantity": self.model_class.quantity + stmt.excluded.quantity,
                "updated_at": now,
            },
        )
        await self.db.execute(stmt)

    async def set_quantity(self, line: CartLine, quantity: int) -> CartLine:
        line.quantity = quantity
        line.updated_at = utc_now()
        await self.db.flush()
        return line

    async def delete_line(self, owner_id: OwnerIdT, line_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            delete(self.model_class)
            .where(self.model_class.id == line_id, self._owner_attr == owner_id)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0

    async def clear(self, owner_id: OwnerIdT) -> int:
        return await self.delete_owned(owner_id)

    async def claim_all(self, owner_id: OwnerIdT) -> list[dict[str, Any]]:
        return await self.claim_owned(owner_id, CLAIM_COLUMNS)

    @staticmethod
    def _snapshot_values(snapshot: CartLineSnapshot) -> dict[str, Any]:
        return {name: getattr(snapshot, name) for name in SNAPSHOT_FIELDS}


class AnonymousCartRepository(SQLAlchemyCartRepository[str]):
    """匿名用户购物车仓储"""

    @property
    def model_class(self) -> type[AnonymousCartItem]:
        return AnonymousCartItem

    @property
    def owner_column(self) -> str:
        return "anonymous_user_id"


class UserCartRepository(SQLAlchemyCartRepository[str]):
    """注册用户购物车仓储"""

    @property
    def model_class(self) -> type[UserCartItem]:
        return UserCartItem

    @property
    def owner_column(self) -> str:
        return "user_id"
