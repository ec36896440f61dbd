"""
Preference Repository Interface - 偏好仓储接口
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from domains.preference.domain.types import LocationUpdate, PreferenceRecord

OwnerIdT = TypeVar("OwnerIdT")


class PreferenceRepository(ABC, Generic[OwnerIdT]):
    """偏好仓储接口"""

    @abstractmethod
    async def get(self, owner_id: OwnerIdT, for_update: bool = False) -> PreferenceRecord | None:
        """获取偏好记录"""
        ...

    @abstractmethod
    async def upsert_location(self, owner_id: OwnerIdT, location: LocationUpdate) -> None:
        """创建或覆盖位置字段（单条语句）"""
        ...

    @abstractmethod
    async def get_or_create(self, owner_id: OwnerIdT) -> PreferenceRecord:
        """获取偏好记录（加锁），不存在则创建空记录"""
        ...

    @abstractmethod
    async def apply_location(self, record: PreferenceRecord, location: LocationUpdate) -> None:
        """覆盖已加载记录的位置字段"""
        ...

    @abstractmethod
    async def touch(self, record: PreferenceRecord) -> None:
        """刷新 updated_at"""
        ...

    @abstractmethod
    async def claim(self, owner_id: OwnerIdT) -> LocationUpdate | None:
        """删除并返回位置数据（合并时使用）；记录不存在返回 None"""
        ...
