"""
Cart Use Case - 购物车用例

编排购物车操作：目录查询、快照生成、条目增删改、汇总计算。
匿名购物车与用户购物车共用本用例，区别只在注入的仓储。
"""

from typing import Generic, TypeVar
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from domains.cart.domain.repositories.cart_repository import CartRepository
from domains.cart.domain.types import CartLineSnapshot, CartView
from domains.catalog.domain.interfaces import CatalogLookup
from exceptions import NotFoundError
from libs.orm.base import utc_now
from utils.logging import get_logger

logger = get_logger(__name__)

OwnerIdT = TypeVar("OwnerIdT")


class CartUseCase(Generic[OwnerIdT]):
    """购物车用例

    每个操作都返回从存储重新计算的购物车视图（clear_cart 除外）。
    """

    def __init__(
        self,
        db: AsyncSession,
        cart_repo: CartRepository[OwnerIdT],
        catalog: CatalogLookup,
    ) -> None:
        self.db = db
        self.cart_repo = cart_repo
        self.catalog = catalog

    async def get_cart(self, owner_id: OwnerIdT) -> CartView:
        """获取购物车"""
        lines = await self.cart_repo.list_lines(owner_id)
        return CartView.from_lines(lines, now=utc_now())

    async def add_item(
        self,
        owner_id: OwnerIdT,
        shop_id: uuid.UUID,
        shop_service_id: uuid.UUID,
        quantity: int,
    ) -> CartView:
        """加入购物车

        已存在相同 (shop, service) 的条目时累加数量，否则按当前目录数据生成快照。

        Raises:
            NotFoundError: 服务不存在、未被该店铺提供，或店铺不存在
        """
        offering = await self.catalog.get_offering(shop_id, shop_service_id)
        if offering is None:
            logger.warning(
                "Service %s not offered by shop %s, cannot add to cart",
                shop_service_id,
                shop_id,
            )
            raise NotFoundError(
                "ShopService",
                str(shop_service_id),
                message="Service not found or not offered by this shop",
            )

        shop_names = await self.catalog.get_shop_names(shop_id)
        if shop_names is None:
            logger.warning("Shop %s not found while adding to cart", shop_id)
            raise NotFoundError("Shop", str(shop_id))

        snapshot = CartLineSnapshot(
            price_at_addition=offering.price,
            service_name_snapshot_en=offering.name_en,
            service_name_snapshot_ar=offering.name_ar,
            shop_name_snapshot_en=shop_names.name_en,
            shop_name_snapshot_ar=shop_names.name_ar,
            service_image_url_snapshot=offering.icon_url,
        )
        await self.cart_repo.add_or_increment(
            owner_id,
            shop_id=shop_id,
            shop_service_id=shop_service_id,
            quantity=quantity,
            snapshot=snapshot,
        )
        logger.debug("Added service %s x%d to cart", shop_service_id, quantity)
        return await self.get_cart(owner_id)

    async def update_item(
        self,
        owner_id: OwnerIdT,
        line_id: uuid.UUID,
        new_quantity: int,
    ) -> CartView:
        """更新条目数量；数量 <= 0 时删除条目

        Raises:
            NotFoundError: 条目不存在或不属于该所有者
        """
        line = await self.cart_repo.get_line(owner_id, line_id, for_update=True)
        if line is None:
            logger.warning("Cart item %s not found for update", line_id)
            raise NotFoundError("CartItem", str(line_id))

        if new_quantity <= 0:
            await self.cart_repo.delete_line(owner_id, line_id)
        else:
            await self.cart_repo.set_quantity(line, new_quantity)
        return await self.get_cart(owner_id)

    async def remove_item(self, owner_id: OwnerIdT, line_id: uuid.UUID) -> CartView:
        """删除条目

        Raises:
            NotFoundError: 条目不存在或不属于该所有者
        """
        if not await self.cart_repo.delete_line(owner_id, line_id):
            logger.warning("Cart item %s not found for removal", line_id)
            raise NotFoundError("CartItem", str(line_id))
        return await self.get_cart(owner_id)

    async def clear_cart(self, owner_id: OwnerIdT) -> int:
        """清空购物车，返回删除的条目数"""
        removed = await self.cart_repo.clear(owner_id)
        if removed:
            logger.debug("Cleared %d cart items", removed)
        return removed
