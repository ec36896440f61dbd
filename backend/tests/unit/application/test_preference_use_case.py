"""
Preference Use Case 单元测试
"""

from datetime import UTC, datetime

import pytest

from domains.preference.application import PreferenceUseCase
from domains.preference.infrastructure.repositories import (
    AnonymousPreferenceRepository,
    UserPreferenceRepository,
)


@pytest.mark.unit
class TestPreferenceUseCase:
    """位置偏好用例测试"""

    @pytest.mark.asyncio
    async def test_get_location_absent(self, db_session):
        """测试: 未设置位置时返回 None"""
        use_case = PreferenceUseCase(db_session, AnonymousPreferenceRepository(db_session))

        assert await use_case.get_location("anon-1") is None

    @pytest.mark.asyncio
    async def test_update_location_creates_record(self, db_session):
        """测试: 首次更新创建记录"""
        # Arrange
        use_case = PreferenceUseCase(db_session, AnonymousPreferenceRepository(db_session))
        before = datetime.now(UTC)

        # Act
        record = await use_case.update_location(
            "anon-1",
            latitude=24.7136,
            longitude=46.6753,
            accuracy=12.5,
            source="gps",
        )

        # Assert
        assert record.last_known_latitude == pytest.approx(24.7136)
        assert record.last_known_longitude == pytest.approx(46.6753)
        assert record.last_known_location_accuracy == pytest.approx(12.5)
        assert record.location_source == "gps"
        assert record.last_set_at is not None
        assert record.last_set_at >= before.replace(microsecond=0)
        assert record.other_preferences is None

    @pytest.mark.asyncio
    async def test_update_location_overwrites_as_unit(self, db_session):
        """测试: 再次更新整体覆盖位置字段，created_at 不变"""
        # Arrange
        use_case = PreferenceUseCase(db_session, UserPreferenceRepository(db_session))
        first = await use_case.update_location("account-1", 10.0, 20.0, 5.0, "gps")
        created_at = first.created_at
        first_set_at = first.last_set_at

        # Act
        record = await use_case.update_location("account-1", -33.9, 18.4, None, "manual")

        # Assert
        assert record.last_known_latitude == pytest.approx(-33.9)
        assert record.last_known_longitude == pytest.approx(18.4)
        assert record.last_known_location_accuracy is None
        assert record.location_source == "manual"
        assert record.created_at == created_at
        assert record.last_set_at >= first_set_at

    @pytest.mark.asyncio
    async def test_one_record_per_owner(self, db_session):
        """测试: 每个所有者只有一条记录"""
        # Arrange
        repo = AnonymousPreferenceRepository(db_session)
        use_case = PreferenceUseCase(db_session, repo)

        # Act
        await use_case.update_location("anon-1", 1.0, 1.0, None, "ip")
        await use_case.update_location("anon-1", 2.0, 2.0, None, "ip")
        await use_case.update_location("anon-2", 3.0, 3.0, None, "ip")

        # Assert
        assert len(await repo.find_owned("anon-1")) == 1
        assert len(await repo.find_owned("anon-2")) == 1
