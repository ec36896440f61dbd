"""
Base Model - 模型基类

包含:
- UTCDateTime: 始终返回带 UTC 时区的时间类型
- TimestampMixin: 时间戳混入类
- BaseModel: 模型基类
"""

from datetime import UTC, datetime
import uuid

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from libs.db.database import Base


def generate_uuid() -> uuid.UUID:
    """生成 UUID"""
    return uuid.uuid4()


def utc_now() -> datetime:
    """当前 UTC 时间"""
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """带时区的时间类型

    写入前统一转换为 UTC；读出时补齐时区信息
    （SQLite 不保存时区，PostgreSQL 的 timestamptz 原样返回）。
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


# =============================================================================
# 时间戳混入类
# =============================================================================


class TimestampMixin:
    """时间戳混入类

    使用 Python 层面的 default 和数据库层面的 server_default 双重保障：
    - default: 在 Python 对象创建时自动填充，确保即使数据库没有默认值也能工作
    - server_default: 在数据库层面也有默认值，作为后备，并且对于直接 SQL 插入也有用
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,  # Python 层面自动填充
        server_default=func.now(),  # 数据库层面默认值（作为后备）
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,  # Python 层面自动更新
        nullable=False,
    )


class BaseModel(Base, TimestampMixin):
    """模型基类"""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=generate_uuid,
    )
