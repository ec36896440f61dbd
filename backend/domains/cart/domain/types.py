"""
Cart Domain Types - 购物车领域类型
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Protocol
import uuid


class CartLine(Protocol):
    """购物车条目协议（匿名表与用户表共用）"""

    id: uuid.UUID
    shop_id: uuid.UUID
    shop_service_id: uuid.UUID
    quantity: int
    price_at_addition: Decimal
    service_name_snapshot_en: str
    service_name_snapshot_ar: str
    shop_name_snapshot_en: str | None
    shop_name_snapshot_ar: str | None
    service_image_url_snapshot: str | None
    added_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class CartView:
    """购物车视图 - 每次都从存储重新计算"""

    items: list[CartLine] = field(default_factory=list)
    total_items: int = 0
    total_amount: Decimal = Decimal("0")
    last_updated_at: datetime | None = None

    @classmethod
    def from_lines(cls, lines: list[CartLine], now: datetime) -> "CartView":
        """由条目计算汇总；空购物车的 last_updated_at 取当前时间"""
        return cls(
            items=list(lines),
            total_items=sum(line.quantity for line in lines),
            total_amount=sum(
                (line.price_at_addition * line.quantity for line in lines),
                Decimal("0"),
            ),
            last_updated_at=max((line.updated_at for line in lines), default=now),
        )


@dataclass(frozen=True, slots=True)
class CartLineSnapshot:
    """新条目的快照数据"""

    price_at_addition: Decimal
    service_name_snapshot_en: str
    service_name_snapshot_ar: str
    shop_name_snapshot_en: str | None = None
    shop_name_snapshot_ar: str | None = None
    service_image_url_snapshot: str | None = None
