"""
Catalog Lookup Interface - 目录查询接口

定义购物车依赖的只读目录查询，遵循依赖倒置原则。
Infrastructure 层提供具体实现。
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol
import uuid


@dataclass(frozen=True, slots=True)
class ServiceOffering:
    """店铺当前提供的服务报价"""

    shop_id: uuid.UUID
    shop_service_id: uuid.UUID
    price: Decimal
    name_en: str
    name_ar: str
    duration_minutes: int | None = None
    icon_url: str | None = None


@dataclass(frozen=True, slots=True)
class ShopNames:
    """店铺名称（英文/阿拉伯文）"""

    name_en: str
    name_ar: str


class CatalogLookup(Protocol):
    """目录查询协议"""

    async def get_offering(
        self,
        shop_id: uuid.UUID,
        shop_service_id: uuid.UUID,
    ) -> ServiceOffering | None:
        """获取店铺当前提供的服务；不存在或已下架返回 None"""
        ...

    async def get_shop_names(self, shop_id: uuid.UUID) -> ShopNames | None:
        """获取店铺名称；店铺不存在返回 None"""
        ...
