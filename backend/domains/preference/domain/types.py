"""
Preference Domain Types - 偏好领域类型
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
import uuid


class PreferenceRecord(Protocol):
    """偏好记录协议（匿名表与用户表共用）"""

    id: uuid.UUID
    last_known_latitude: float | None
    last_known_longitude: float | None
    last_known_location_accuracy: float | None
    location_source: str | None
    last_set_at: datetime | None
    other_preferences: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class LocationUpdate:
    """一次位置更新（四个位置字段 + 设置时间，作为整体写入）"""

    latitude: float | None
    longitude: float | None
    accuracy: float | None
    source: str | None
    set_at: datetime | None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def as_columns(self) -> dict[str, Any]:
        return {
            "last_known_latitude": self.latitude,
            "last_known_longitude": self.longitude,
            "last_known_location_accuracy": self.accuracy,
            "location_source": self.source,
            "last_set_at": self.set_at,
        }

    @classmethod
    def from_columns(cls, values: dict[str, Any]) -> "LocationUpdate":
        return cls(
            latitude=values.get("last_known_latitude"),
            longitude=values.get("last_known_longitude"),
            accuracy=values.get("last_known_location_accuracy"),
            source=values.get("location_source"),
            set_at=values.get("last_set_at"),
        )
