"""
Cart Item Models - 购物车条目模型

匿名用户与注册用户各一张表，字段完全对称，只有所有者字段不同：
- anonymous_cart_items.anonymous_user_id: 匿名会话 Token 中的 anon_id
- user_cart_items.user_id: 注册用户账号 ID

价格、名称、图片均为加入购物车时的快照，之后不再刷新。
"""

from datetime import datetime
from decimal import Decimal
import uuid

from sqlalchemy import CheckConstraint, Integer, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.orm.base import Base, UTCDateTime, generate_uuid, utc_now

# 快照字段（合并时原样复制）
SNAPSHOT_FIELDS = (
    "price_at_addition",
    "service_name_snapshot_en",
    "service_name_snapshot_ar",
    "shop_name_snapshot_en",
    "shop_name_snapshot_ar",
    "service_image_url_snapshot",
)


class CartItemMixin:
    """购物车条目公共字段"""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=generate_uuid,
    )
    shop_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    shop_service_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_at_addition: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    service_name_snapshot_en: Mapped[str] = mapped_column(String(200), nullable=False)
    service_name_snapshot_ar: Mapped[str] = mapped_column(String(200), nullable=False)
    shop_name_snapshot_en: Mapped[str | None] = mapped_column(String(200), nullable=True)
    shop_name_snapshot_ar: Mapped[str | None] = mapped_column(String(200), nullable=True)
    service_image_url_snapshot: Mapped[str | None] = mapped_column(String(500), nullable=True)
    added_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utc_now, nullable=False)

    @property
    def line_total(self) -> Decimal:
        """小计"""
        return self.price_at_addition * self.quantity


class AnonymousCartItem(Base, CartItemMixin):
    """匿名用户购物车条目"""

    __tablename__ = "anonymous_cart_items"
    __table_args__ = (
        UniqueConstraint(
            "anonymous_user_id",
            "shop_id",
            "shop_service_id",
            name="uq_anonymous_cart_items_owner_service",
        ),
        CheckConstraint("quantity > 0", name="ck_anonymous_cart_items_quantity_positive"),
    )

    anonymous_user_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="匿名会话 Token 中的 anon_id",
    )

    def __repr__(self) -> str:
        return f"<AnonymousCartItem {self.shop_service_id} x{self.quantity}>"


class UserCartItem(Base, CartItemMixin):
    """注册用户购物车条目"""

    __tablename__ = "user_cart_items"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "shop_id",
            "shop_service_id",
            name="uq_user_cart_items_owner_service",
        ),
        CheckConstraint("quantity > 0", name="ck_user_cart_items_quantity_positive"),
    )

    user_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="注册用户账号 ID",
    )

    def __repr__(self) -> str:
        return f"<UserCartItem {self.shop_service_id} x{self.quantity}>"
