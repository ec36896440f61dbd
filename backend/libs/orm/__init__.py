from libs.orm.base import (
    Base,
    BaseModel,
    TimestampMixin,
    UTCDateTime,
    generate_uuid,
    utc_now,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "UTCDateTime",
    "generate_uuid",
    "utc_now",
]
