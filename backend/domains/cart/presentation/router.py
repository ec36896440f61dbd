"""
Cart API - 购物车接口

匿名购物车（/anonymous/cart）与用户购物车（/users/me/cart）路由完全相同，
只是所有者 ID 与服务来自不同的依赖。
"""

from collections.abc import Callable
from typing import Any
import uuid

from fastapi import APIRouter, Depends, status

from domains.cart.application import CartUseCase
from domains.cart.presentation.schemas import (
    AddCartItemRequest,
    CartResponse,
    UpdateCartItemRequest,
)
from domains.identity.presentation.deps import get_anonymous_user_id, get_current_account_id
from libs.api.deps import get_anonymous_cart_service, get_user_cart_service


def build_cart_router(
    get_owner_id: Callable[..., Any],
    get_service: Callable[..., Any],
) -> APIRouter:
    """构建购物车路由

    Args:
        get_owner_id: 解析所有者 ID 的依赖
        get_service: 构造 CartUseCase 的依赖
    """
    router = APIRouter()

    @router.get("", response_model=CartResponse)
    async def get_cart(
        owner_id: str = Depends(get_owner_id),
        service: CartUseCase[str] = Depends(get_service),
    ) -> CartResponse:
        """获取购物车"""
        return CartResponse.from_view(await service.get_cart(owner_id))

    @router.post("/items", response_model=CartResponse)
    async def add_item(
        request: AddCartItemRequest,
        owner_id: str = Depends(get_owner_id),
        service: CartUseCase[str] = Depends(get_service),
    ) -> CartResponse:
        """加入购物车（已存在则累加数量）"""
        view = await service.add_item(
            owner_id,
            shop_id=request.shop_id,
            shop_service_id=request.shop_service_id,
            quantity=request.quantity,
        )
        return CartResponse.from_view(view)

    @router.put("/items/{item_id}", response_model=CartResponse)
    async def update_item(
        item_id: uuid.UUID,
        request: UpdateCartItemRequest,
        owner_id: str = Depends(get_owner_id),
        service: CartUseCase[str] = Depends(get_service),
    ) -> CartResponse:
        """更新条目数量（0 删除条目）"""
        view = await service.update_item(owner_id, item_id, request.quantity)
        return CartResponse.from_view(view)

    @router.delete("/items/{item_id}", response_model=CartResponse)
    async def remove_item(
        item_id: uuid.UUID,
        owner_id: str = Depends(get_owner_id),
        service: CartUseCase[str] = Depends(get_service),
    ) -> CartResponse:
        """删除条目"""
        return CartResponse.from_view(await service.remove_item(owner_id, item_id))

    @router.delete("", status_code=status.HTTP_204_NO_CONTENT)
    async def clear_cart(
        owner_id: str = Depends(get_owner_id),
        service: CartUseCase[str] = Depends(get_service),
    ) -> None:
        """清空购物车"""
        await service.clear_cart(owner_id)

    return router


anonymous_cart_router = build_cart_router(get_anonymous_user_id, get_anonymous_cart_service)
user_cart_router = build_cart_router(get_current_account_id, get_user_cart_service)
