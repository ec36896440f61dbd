"""
匿名购物车 API 集成测试

测试匿名会话签发、匿名购物车与位置偏好接口
"""

from decimal import Decimal
import uuid

from httpx import AsyncClient
import pytest

from exceptions import ConfigurationError


@pytest.mark.integration
class TestAnonymousSessionAPI:
    """匿名会话 API 测试"""

    @pytest.mark.asyncio
    async def test_issue_anonymous_session(self, client: AsyncClient, token_validator):
        """测试: 签发匿名会话 Token"""
        # Act
        response = await client.post("/api/anonymous/sessions")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert token_validator.validate(data["anonymousSessionToken"]) == data["anonymousUserId"]
        assert "expiresAt" in data

    @pytest.mark.asyncio
    async def test_configuration_error_is_generic(self, client: AsyncClient):
        """测试: 配置错误返回 500，不暴露细节"""
        # pylint: disable=import-outside-toplevel
        from bootstrap.main import app
        from domains.identity.presentation.deps import get_anonymous_session_config

        def broken_config():
            raise ConfigurationError(
                "Anonymous session configuration is missing: anonymous_session_issuer",
                missing=["anonymous_session_issuer"],
            )

        app.dependency_overrides[get_anonymous_session_config] = broken_config

        response = await client.post("/api/anonymous/sessions")

        assert response.status_code == 500
        assert response.json()["detail"] == "Server configuration error."
        assert "anonymous_session_issuer" not in response.text

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        """测试: 健康检查"""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


@pytest.mark.integration
class TestAnonymousCartAPI:
    """匿名购物车 API 测试"""

    @pytest.mark.asyncio
    async def test_cart_requires_anonymous_token(self, client: AsyncClient):
        """测试: 没有匿名 Token 返回 401"""
        response = await client.get("/api/anonymous/cart")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_cart_rejects_invalid_token(self, client: AsyncClient):
        """测试: 无效匿名 Token 返回 401"""
        response = await client.get(
            "/api/anonymous/cart",
            headers={"X-Anonymous-Token": "invalid-token"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_cart(self, client: AsyncClient, anonymous_headers):
        """测试: 新会话的购物车为空"""
        response = await client.get("/api/anonymous/cart", headers=anonymous_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["totalItems"] == 0
        assert Decimal(str(data["totalAmount"])) == Decimal("0")
        assert data["lastUpdatedAt"] is not None

    @pytest.mark.asyncio
    async def test_add_item(self, client: AsyncClient, anonymous_headers, catalog):
        """测试: 加入购物车"""
        # Act
        response = await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={
                "shopId": str(catalog.shop_id),
                "shopServiceId": str(catalog.haircut_id),
                "quantity": 2,
            },
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["totalItems"] == 2
        assert Decimal(str(data["totalAmount"])) == Decimal("30.00")
        item = data["items"][0]
        assert item["shopServiceId"] == str(catalog.haircut_id)
        assert item["quantity"] == 2
        assert Decimal(str(item["lineTotal"])) == Decimal("30.00")
        assert item["serviceNameSnapshotEn"] == "Haircut"
        assert item["shopNameSnapshotEn"] == "Gold Scissors"

    @pytest.mark.asyncio
    async def test_add_item_twice_increments(self, client: AsyncClient, anonymous_headers, catalog):
        """测试: 重复加入同一服务累加数量"""
        body = {"shopId": str(catalog.shop_id), "shopServiceId": str(catalog.haircut_id), "quantity": 1}

        await client.post("/api/anonymous/cart/items", headers=anonymous_headers, json=body)
        response = await client.post("/api/anonymous/cart/items", headers=anonymous_headers, json=body)

        data = response.json()
        assert len(data["items"]) == 1
        assert data["items"][0]["quantity"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, 101])
    async def test_add_item_quantity_range(self, client: AsyncClient, anonymous_headers, catalog, quantity):
        """测试: 加入数量必须在 1-100 之间"""
        response = await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={
                "shopId": str(catalog.shop_id),
                "shopServiceId": str(catalog.haircut_id),
                "quantity": quantity,
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_add_unknown_service(self, client: AsyncClient, anonymous_headers, catalog):
        """测试: 服务不存在返回 404"""
        response = await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={"shopId": str(catalog.shop_id), "shopServiceId": str(uuid.uuid4()), "quantity": 1},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_update_and_remove_item(self, client: AsyncClient, anonymous_headers, catalog):
        """测试: 更新数量与删除条目"""
        # Arrange
        added = await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={"shopId": str(catalog.shop_id), "shopServiceId": str(catalog.haircut_id), "quantity": 1},
        )
        item_id = added.json()["items"][0]["id"]

        # Act - 更新
        updated = await client.put(
            f"/api/anonymous/cart/items/{item_id}",
            headers=anonymous_headers,
            json={"quantity": 5},
        )

        # Assert
        assert updated.status_code == 200
        assert updated.json()["items"][0]["quantity"] == 5

        # Act - 删除
        removed = await client.delete(f"/api/anonymous/cart/items/{item_id}", headers=anonymous_headers)

        # Assert
        assert removed.status_code == 200
        assert removed.json()["items"] == []

        missing = await client.delete(f"/api/anonymous/cart/items/{item_id}", headers=anonymous_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_update_to_zero_removes(self, client: AsyncClient, anonymous_headers, catalog):
        """测试: 数量更新为 0 删除条目"""
        added = await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={"shopId": str(catalog.shop_id), "shopServiceId": str(catalog.haircut_id), "quantity": 3},
        )
        item_id = added.json()["items"][0]["id"]

        response = await client.put(
            f"/api/anonymous/cart/items/{item_id}",
            headers=anonymous_headers,
            json={"quantity": 0},
        )

        assert response.status_code == 200
        assert response.json()["totalItems"] == 0

    @pytest.mark.asyncio
    async def test_update_quantity_out_of_range(self, client: AsyncClient, anonymous_headers):
        """测试: 更新数量超过 100 返回 422"""
        response = await client.put(
            f"/api/anonymous/cart/items/{uuid.uuid4()}",
            headers=anonymous_headers,
            json={"quantity": 101},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_clear_cart(self, client: AsyncClient, anonymous_headers, catalog):
        """测试: 清空购物车"""
        await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={"shopId": str(catalog.shop_id), "shopServiceId": str(catalog.haircut_id), "quantity": 1},
        )

        response = await client.delete("/api/anonymous/cart", headers=anonymous_headers)

        assert response.status_code == 204
        cart = await client.get("/api/anonymous/cart", headers=anonymous_headers)
        assert cart.json()["items"] == []

    @pytest.mark.asyncio
    async def test_carts_isolated_between_sessions(
        self, client: AsyncClient, anonymous_headers, token_issuer, catalog
    ):
        """测试: 不同匿名会话的购物车互相隔离"""
        await client.post(
            "/api/anonymous/cart/items",
            headers=anonymous_headers,
            json={"shopId": str(catalog.shop_id), "shopServiceId": str(catalog.haircut_id), "quantity": 1},
        )

        other = await client.get(
            "/api/anonymous/cart",
            headers={"X-Anonymous-Token": token_issuer.issue()},
        )

        assert other.json()["items"] == []


@pytest.mark.integration
class TestAnonymousPreferenceAPI:
    """匿名位置偏好 API 测试"""

    @pytest.mark.asyncio
    async def test_location_absent(self, client: AsyncClient, anonymous_headers):
        """测试: 未设置位置时返回 null"""
        response = await client.get("/api/anonymous/preferences/location", headers=anonymous_headers)

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_update_location(self, client: AsyncClient, anonymous_headers):
        """测试: 更新并读取位置"""
        # Act
        response = await client.put(
            "/api/anonymous/preferences/location",
            headers=anonymous_headers,
            json={"latitude": 24.7136, "longitude": 46.6753, "accuracy": 15.0, "source": "gps"},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["latitude"] == pytest.approx(24.7136)
        assert data["source"] == "gps"
        assert data["lastSetAt"] is not None

        fetched = await client.get("/api/anonymous/preferences/location", headers=anonymous_headers)
        assert fetched.json()["longitude"] == pytest.approx(46.6753)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"latitude": 91, "longitude": 0, "source": "gps"},
            {"latitude": 0, "longitude": -181, "source": "gps"},
            {"latitude": 0, "longitude": 0, "source": ""},
            {"latitude": 0, "longitude": 0, "source": "x" * 51},
            {"latitude": 0, "longitude": 0},
        ],
    )
    async def test_update_location_validation(self, client: AsyncClient, anonymous_headers, body):
        """测试: 坐标范围与来源长度校验"""
        response = await client.put(
            "/api/anonymous/preferences/location",
            headers=anonymous_headers,
            json=body,
        )

        assert response.status_code == 422
