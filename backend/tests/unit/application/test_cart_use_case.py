"""
Cart Use Case 单元测试
"""

from datetime import timedelta
from decimal import Decimal
import uuid

import pytest
from sqlalchemy import select

from domains.cart.application import CartUseCase
from domains.cart.infrastructure.models import AnonymousCartItem
from domains.cart.infrastructure.repositories import AnonymousCartRepository, UserCartRepository
from domains.catalog.infrastructure.models.catalog import ShopService
from domains.catalog.infrastructure.sqlalchemy_catalog_lookup import SQLAlchemyCatalogLookup
from exceptions import NotFoundError


def _anonymous_cart(db_session) -> CartUseCase[str]:
    return CartUseCase(db_session, AnonymousCartRepository(db_session), SQLAlchemyCatalogLookup(db_session))


def _user_cart(db_session) -> CartUseCase[str]:
    return CartUseCase(db_session, UserCartRepository(db_session), SQLAlchemyCatalogLookup(db_session))


@pytest.mark.unit
class TestCartUseCase:
    """购物车用例测试"""

    @pytest.mark.asyncio
    async def test_empty_cart(self, db_session):
        """测试: 空购物车"""
        # Act
        cart = await _anonymous_cart(db_session).get_cart("anon-1")

        # Assert
        assert cart.items == []
        assert cart.total_items == 0
        assert cart.total_amount == Decimal("0")
        assert cart.last_updated_at is not None

    @pytest.mark.asyncio
    async def test_add_item_snapshots_catalog(self, db_session, catalog):
        """测试: 加入购物车时记录价格、名称、图片快照"""
        # Act
        cart = await _anonymous_cart(db_session).add_item(
            "anon-1",
            shop_id=catalog.shop_id,
            shop_service_id=catalog.haircut_id,
            quantity=2,
        )

        # Assert
        assert len(cart.items) == 1
        line = cart.items[0]
        assert line.quantity == 2
        assert line.price_at_addition == Decimal("15.00")
        assert line.service_name_snapshot_en == "Haircut"
        assert line.service_name_snapshot_ar == "قص الشعر"
        assert line.shop_name_snapshot_en == "Gold Scissors"
        assert line.shop_name_snapshot_ar == "المقص الذهبي"
        assert line.service_image_url_snapshot == "https://cdn.example.com/shops/gold/haircut.png"
        assert line.added_at == line.updated_at
        assert cart.total_items == 2
        assert cart.total_amount == Decimal("30.00")

    @pytest.mark.asyncio
    async def test_add_item_falls_back_to_default_icon(self, db_session, catalog):
        """测试: 店铺没有自定义图标时使用全局默认图标"""
        cart = await _anonymous_cart(db_session).add_item(
            "anon-1",
            shop_id=catalog.shop_id,
            shop_service_id=catalog.beard_trim_id,
            quantity=1,
        )

        assert cart.items[0].service_image_url_snapshot == "https://cdn.example.com/services/beard.png"

    @pytest.mark.asyncio
    async def test_add_same_service_increments_quantity(self, db_session, catalog):
        """测试: 重复加入同一服务累加数量，不新增条目"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        first = await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 2)
        added_at = first.items[0].added_at

        # Act
        cart = await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 3)

        # Assert
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.items[0].added_at == added_at
        assert cart.total_amount == Decimal("75.00")

    @pytest.mark.asyncio
    async def test_add_item_keeps_original_snapshot(self, db_session, catalog):
        """测试: 累加数量时不刷新价格快照"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 1)
        service = await db_session.get(ShopService, catalog.haircut_id)
        service.price = Decimal("99.00")
        await db_session.flush()

        # Act
        cart = await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 1)

        # Assert
        assert cart.items[0].quantity == 2
        assert cart.items[0].price_at_addition == Decimal("15.00")

    @pytest.mark.asyncio
    async def test_add_unknown_service(self, db_session, catalog):
        """测试: 服务不存在抛出 NotFoundError"""
        with pytest.raises(NotFoundError):
            await _anonymous_cart(db_session).add_item("anon-1", catalog.shop_id, uuid.uuid4(), 1)

    @pytest.mark.asyncio
    async def test_add_service_not_offered(self, db_session, catalog):
        """测试: 已下架的服务不能加入购物车"""
        with pytest.raises(NotFoundError):
            await _anonymous_cart(db_session).add_item(
                "anon-1", catalog.shop_id, catalog.retired_service_id, 1
            )

    @pytest.mark.asyncio
    async def test_add_service_from_other_shop(self, db_session, catalog):
        """测试: 服务不属于指定店铺时抛出 NotFoundError"""
        with pytest.raises(NotFoundError):
            await _anonymous_cart(db_session).add_item(
                "anon-1", catalog.shop_id, catalog.other_shop_service_id, 1
            )

    @pytest.mark.asyncio
    async def test_items_ordered_by_added_at_desc(self, db_session, catalog):
        """测试: 条目按加入时间倒序"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 1)
        await use_case.add_item("anon-1", catalog.shop_id, catalog.beard_trim_id, 1)
        older = (
            await db_session.execute(
                select(AnonymousCartItem).where(AnonymousCartItem.shop_service_id == catalog.haircut_id)
            )
        ).scalar_one()
        older.added_at = older.added_at - timedelta(minutes=5)
        await db_session.flush()

        # Act
        cart = await use_case.get_cart("anon-1")

        # Assert
        assert [line.shop_service_id for line in cart.items] == [
            catalog.beard_trim_id,
            catalog.haircut_id,
        ]
        assert cart.total_items == 2
        assert cart.total_amount == Decimal("22.50")

    @pytest.mark.asyncio
    async def test_update_item_quantity(self, db_session, catalog):
        """测试: 更新条目数量"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        cart = await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 1)
        line_id = cart.items[0].id

        # Act
        cart = await use_case.update_item("anon-1", line_id, 4)

        # Assert
        assert cart.items[0].quantity == 4
        assert cart.total_amount == Decimal("60.00")

    @pytest.mark.asyncio
    async def test_update_item_to_zero_removes_line(self, db_session, catalog):
        """测试: 数量更新为 0 时删除条目"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        cart = await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 3)

        # Act
        cart = await use_case.update_item("anon-1", cart.items[0].id, 0)

        # Assert
        assert cart.items == []
        assert cart.total_items == 0

    @pytest.mark.asyncio
    async def test_update_missing_item(self, db_session):
        """测试: 更新不存在的条目抛出 NotFoundError"""
        with pytest.raises(NotFoundError):
            await _anonymous_cart(db_session).update_item("anon-1", uuid.uuid4(), 2)

    @pytest.mark.asyncio
    async def test_owner_isolation(self, db_session, catalog):
        """测试: 不能操作其他所有者的条目"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        cart = await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 1)
        line_id = cart.items[0].id

        # Act & Assert
        with pytest.raises(NotFoundError):
            await use_case.update_item("anon-2", line_id, 5)
        with pytest.raises(NotFoundError):
            await use_case.remove_item("anon-2", line_id)
        assert (await use_case.get_cart("anon-2")).items == []
        assert (await use_case.get_cart("anon-1")).items[0].quantity == 1

    @pytest.mark.asyncio
    async def test_anonymous_and_user_carts_are_separate(self, db_session, catalog):
        """测试: 相同 ID 的匿名购物车与用户购物车互不影响"""
        await _anonymous_cart(db_session).add_item("same-id", catalog.shop_id, catalog.haircut_id, 1)

        user_cart = await _user_cart(db_session).get_cart("same-id")

        assert user_cart.items == []

    @pytest.mark.asyncio
    async def test_remove_item(self, db_session, catalog):
        """测试: 删除条目"""
        # Arrange
        use_case = _anonymous_cart(db_session)
        await use_case.add_item("anon-1", catalog.shop_id, catalog.haircut_id, 1)
        cart = await use_case.add_item("anon-1", catalog.shop_id, catalog.beard_trim_id, 2)
        beard_line = next(line for line in cart.items if line.shop_service_id == catalog.beard_trim_id)

        # Act
        cart = await use_case.remove_item("anon-1", beard_line.id)

        # Assert
        assert [line.shop_service_id for line in cart.items] == [catalog.haircut_id]

    @pytest.mark.asyncio
    async def test_remove_missing_item(self, db_session):
        """测试: 删除不存在的条目抛出 NotFoundError"""
        with pytest.raises(NotFoundError):
            await _anonymous_cart(db_session).remove_item("anon-1", uuid.uuid4())

    @pytest.mark.asyncio
    async def test_clear_cart(self, db_session, catalog):
        """测试: 清空购物车"""
        # Arrange
        use_case = _user_cart(db_session)
        await use_case.add_item("account-1", catalog.shop_id, catalog.haircut_id, 1)
        await use_case.add_item("account-1", catalog.shop_id, catalog.beard_trim_id, 1)

        # Act
        removed = await use_case.clear_cart("account-1")

        # Assert
        assert removed == 2
        assert (await use_case.get_cart("account-1")).items == []

    @pytest.mark.asyncio
    async def test_clear_empty_cart(self, db_session):
        """测试: 清空空购物车是无操作"""
        assert await _user_cart(db_session).clear_cart("account-1") == 0
