"""
SQLAlchemy Catalog Lookup - 目录查询实现
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domains.catalog.domain.interfaces import ServiceOffering, ShopNames
from domains.catalog.infrastructure.models.catalog import Shop, ShopService


class SQLAlchemyCatalogLookup:
    """SQLAlchemy 目录查询实现"""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_offering(
        self,
        shop_id: uuid.UUID,
        shop_service_id: uuid.UUID,
    ) -> ServiceOffering | None:
        """获取店铺当前提供的服务"""
        result = await self.db.execute(
            select(ShopService).where(
                ShopService.id == shop_service_id,
                ShopService.shop_id == shop_id,
                ShopService.is_offered_by_shop.is_(True),
            )
        )
        service = result.scalar_one_or_none()
        if service is None:
            return None

        return ServiceOffering(
            shop_id=service.shop_id,
            shop_service_id=service.id,
            price=service.price,
            name_en=service.effective_name_en,
            name_ar=service.effective_name_ar,
            duration_minutes=service.duration_minutes,
            icon_url=service.shop_specific_icon_url or service.default_icon_url,
        )

    async def get_shop_names(self, shop_id: uuid.UUID) -> ShopNames | None:
        """获取店铺名称"""
        result = await self.db.execute(select(Shop.name_en, Shop.name_ar).where(Shop.id == shop_id))
        row = result.one_or_none()
        if row is None:
            return None
        return ShopNames(name_en=row.name_en, name_ar=row.name_ar)
