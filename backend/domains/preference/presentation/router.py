"""
Preference API - 位置偏好接口
"""

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends

from domains.identity.presentation.deps import get_anonymous_user_id, get_current_account_id
from domains.preference.application import PreferenceUseCase
from domains.preference.presentation.schemas import LocationResponse, UpdateLocationRequest
from libs.api.deps import get_anonymous_preference_service, get_user_preference_service


def build_preference_router(
    get_owner_id: Callable[..., Any],
    get_service: Callable[..., Any],
) -> APIRouter:
    """构建位置偏好路由"""
    router = APIRouter()

    @router.get("/location", response_model=LocationResponse | None)
    async def get_location(
        owner_id: str = Depends(get_owner_id),
        service: PreferenceUseCase[str] = Depends(get_service),
    ) -> LocationResponse | None:
        """获取位置偏好（未设置时返回 null）"""
        record = await service.get_location(owner_id)
        return LocationResponse.from_record(record) if record else None

    @router.put("/location", response_model=LocationResponse)
    async def update_location(
        request: UpdateLocationRequest,
        owner_id: str = Depends(get_owner_id),
        service: PreferenceUseCase[str] = Depends(get_service),
    ) -> LocationResponse:
        """更新位置偏好"""
        record = await service.update_location(
            owner_id,
            latitude=request.latitude,
            longitude=request.longitude,
            accuracy=request.accuracy,
            source=request.source,
        )
        return LocationResponse.from_record(record)

    return router


anonymous_preference_router = build_preference_router(
    get_anonymous_user_id,
    get_anonymous_preference_service,
)
user_preference_router = build_preference_router(
    get_current_account_id,
    get_user_preference_service,
)
