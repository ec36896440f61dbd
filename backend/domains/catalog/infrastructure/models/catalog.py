"""
Catalog Models - 店铺/服务目录模型

目录数据由目录服务维护，这里只做只读映射。
"""

from decimal import Decimal
import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.orm.base import BaseModel


class Shop(BaseModel):
    """店铺模型"""

    __tablename__ = "shops"

    name_en: Mapped[str] = mapped_column(String(200), nullable=False)
    name_ar: Mapped[str] = mapped_column(String(200), nullable=False)

    def __repr__(self) -> str:
        return f"<Shop {self.name_en}>"


class ShopService(BaseModel):
    """店铺服务模型"""

    __tablename__ = "shop_services"

    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    effective_name_en: Mapped[str] = mapped_column(String(200), nullable=False)
    effective_name_ar: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    shop_specific_icon_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    default_icon_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="全局服务定义的默认图标",
    )
    is_offered_by_shop: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ShopService {self.effective_name_en}>"
