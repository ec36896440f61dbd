"""
Preference Presentation Schemas - 偏好请求/响应模式
"""

from datetime import datetime

from pydantic import Field

from domains.preference.domain.types import PreferenceRecord
from libs.api.schemas import CamelModel


class UpdateLocationRequest(CamelModel):
    """更新位置请求"""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0, description="精度（米）")
    source: str = Field(..., min_length=1, max_length=50, description="位置来源，如 gps / ip / manual")


class LocationResponse(CamelModel):
    """位置偏好"""

    latitude: float | None = None
    longitude: float | None = None
    accuracy: float | None = None
    source: str | None = None
    last_set_at: datetime | None = None
    updated_at: datetime

    @classmethod
    def from_record(cls, record: PreferenceRecord) -> "LocationResponse":
        return cls(
            latitude=record.last_known_latitude,
            longitude=record.last_known_longitude,
            accuracy=record.last_known_location_accuracy,
            source=record.location_source,
            last_set_at=record.last_set_at,
            updated_at=record.updated_at,
        )
