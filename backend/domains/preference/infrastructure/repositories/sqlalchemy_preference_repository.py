"""
SQLAlchemy Preference Repository - 偏好仓储实现
"""

from typing import TypeVar

from domains.preference.domain.repositories.preference_repository import PreferenceRepository
from domains.preference.domain.types import LocationUpdate, PreferenceRecord
from domains.preference.infrastructure.models.preference import (
    LOCATION_FIELDS,
    AnonymousUserPreference,
    PreferenceMixin,
    UserPreference,
)
from libs.db.base_repository import OwnedRepositoryBase
from libs.orm.base import generate_uuid, utc_now

OwnerIdT = TypeVar("OwnerIdT")


class SQLAlchemyPreferenceRepository(
    OwnedRepositoryBase[PreferenceMixin, OwnerIdT],
    PreferenceRepository[OwnerIdT],
):
    """偏好仓储的 SQLAlchemy 实现"""

    async def get(self, owner_id: OwnerIdT, for_update: bool = False) -> PreferenceRecord | None:
        records = await self.find_owned(owner_id, for_update=for_update)
        return records[0] if records else None

    async def upsert_location(self, owner_id: OwnerIdT, location: LocationUpdate) -> None:
        """INSERT ... ON CONFLICT (owner) DO UPDATE

        五个位置字段整体覆盖，created_at 只在首次创建时写入。
        """
        now = utc_now()
        columns = location.as_columns()
        stmt = self._insert().values(
            id=generate_uuid(),
            created_at=now,
            updated_at=now,
            **{self.owner_column: owner_id},
            **columns,
        )
        set_ = {name: getattr(stmt.excluded, name) for name in columns}
        set_["updated_at"] = now
        stmt = stmt.on_conflict_do_update(index_elements=[self.owner_column], set_=set_)
        await self.db.execute(stmt)

    async def get_or_create(self, owner_id: OwnerIdT) -> PreferenceRecord:
        record = await self.get(owner_id, for_update=True)
        if record is None:
            record = self.model_class(**{self.owner_column: owner_id})
            self.db.add(record)
            await self.db.flush()
        return record

    async def apply_location(self, record: PreferenceRecord, location: LocationUpdate) -> None:
        for name, value in location.as_columns().items():
            setattr(record, name, value)
        record.updated_at = utc_now()
        await self.db.flush()

    async def touch(self, record: PreferenceRecord) -> None:
        record.updated_at = utc_now()
        await self.db.flush()

    async def claim(self, owner_id: OwnerIdT) -> LocationUpdate | None:
        rows = await self.claim_owned(owner_id, LOCATION_FIELDS)
        if not rows:
            return None
        return LocationUpdate.from_columns(rows[0])


class AnonymousPreferenceRepository(SQLAlchemyPreferenceRepository[str]):
    """匿名用户偏好仓储"""

    @property
    def model_class(self) -> type[AnonymousUserPreference]:
        return AnonymousUserPreference

    @property
    def owner_column(self) -> str:
        return "anonymous_user_id"


class UserPreferenceRepository(SQLAlchemyPreferenceRepository[str]):
    """注册用户偏好仓储"""

    @property
    def model_class(self) -> type[UserPreference]:
        return UserPreference

    @property
    def owner_column(self) -> str:
        return "user_id"
