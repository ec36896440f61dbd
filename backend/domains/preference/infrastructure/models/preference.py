"""
Preference Models - 用户偏好模型

每个所有者最多一条记录：
- anonymous_user_preferences.anonymous_user_id
- user_preferences.user_id
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Float, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from libs.orm.base import BaseModel, UTCDateTime

# 位置字段（合并时作为整体覆盖）
LOCATION_FIELDS = (
    "last_known_latitude",
    "last_known_longitude",
    "last_known_location_accuracy",
    "location_source",
    "last_set_at",
)


class PreferenceMixin:
    """偏好公共字段"""

    last_known_latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_known_longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_known_location_accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_source: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="位置来源，如 gps / ip / manual",
    )
    last_set_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    other_preferences: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )


class AnonymousUserPreference(BaseModel, PreferenceMixin):
    """匿名用户偏好"""

    __tablename__ = "anonymous_user_preferences"

    anonymous_user_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<AnonymousUserPreference {self.anonymous_user_id[:8]}>"


class UserPreference(BaseModel, PreferenceMixin):
    """注册用户偏好"""

    __tablename__ = "user_preferences"

    user_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserPreference {self.user_id}>"
