"""
Preference Use Case - 偏好用例

位置偏好的读取与更新。坐标范围校验在请求模型中完成。
"""

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from domains.preference.domain.repositories.preference_repository import PreferenceRepository
from domains.preference.domain.types import LocationUpdate, PreferenceRecord
from libs.orm.base import utc_now
from utils.logging import get_logger

logger = get_logger(__name__)

OwnerIdT = TypeVar("OwnerIdT")


class PreferenceUseCase(Generic[OwnerIdT]):
    """偏好用例"""

    def __init__(self, db: AsyncSession, preference_repo: PreferenceRepository[OwnerIdT]) -> None:
        self.db = db
        self.preference_repo = preference_repo

    async def get_location(self, owner_id: OwnerIdT) -> PreferenceRecord | None:
        """获取位置偏好；没有记录时返回 None"""
        return await self.preference_repo.get(owner_id)

    async def update_location(
        self,
        owner_id: OwnerIdT,
        latitude: float,
        longitude: float,
        accuracy: float | None,
        source: str,
    ) -> PreferenceRecord:
        """更新位置偏好（不存在则创建），last_set_at 取当前时间"""
        location = LocationUpdate(
            latitude=latitude,
            longitude=longitude,
            accuracy=accuracy,
            source=source,
            set_at=utc_now(),
        )
        await self.preference_repo.upsert_location(owner_id, location)
        logger.debug("Location preference updated (source=%s)", source)

        record = await self.preference_repo.get(owner_id)
        if record is None:
            raise RuntimeError("Preference record missing after upsert")
        return record
