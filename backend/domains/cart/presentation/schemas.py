"""
Cart Presentation Schemas - 购物车请求/响应模式
"""

from datetime import datetime
from decimal import Decimal
import uuid

from pydantic import Field

from domains.cart.domain.types import CartView
from libs.api.schemas import CamelModel

MAX_LINE_QUANTITY = 100


class AddCartItemRequest(CamelModel):
    """加入购物车请求"""

    shop_id: uuid.UUID
    shop_service_id: uuid.UUID
    quantity: int = Field(default=1, ge=1, le=MAX_LINE_QUANTITY)


class UpdateCartItemRequest(CamelModel):
    """更新数量请求（0 表示删除）"""

    quantity: int = Field(..., ge=0, le=MAX_LINE_QUANTITY)


class CartItemResponse(CamelModel):
    """购物车条目"""

    id: uuid.UUID
    shop_id: uuid.UUID
    shop_service_id: uuid.UUID
    quantity: int
    price_at_addition: Decimal
    line_total: Decimal
    service_name_snapshot_en: str
    service_name_snapshot_ar: str
    shop_name_snapshot_en: str | None = None
    shop_name_snapshot_ar: str | None = None
    service_image_url_snapshot: str | None = None
    added_at: datetime
    updated_at: datetime


class CartResponse(CamelModel):
    """购物车"""

    items: list[CartItemResponse]
    total_items: int
    total_amount: Decimal
    last_updated_at: datetime

    @classmethod
    def from_view(cls, view: CartView) -> "CartResponse":
        return cls(
            items=[CartItemResponse.model_validate(line) for line in view.items],
            total_items=view.total_items,
            total_amount=view.total_amount,
            last_updated_at=view.last_updated_at,
        )
