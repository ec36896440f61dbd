"""
Identity API - 匿名会话与账号合并接口
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from domains.identity.application.anonymous_data_merge_service import AnonymousDataMergeService
from domains.identity.domain.types import MergeFailureReason
from domains.identity.infrastructure.auth import AnonymousTokenIssuer
from domains.identity.presentation.deps import (
    AccountId,
    get_anonymous_token_issuer,
    get_merge_service,
)
from domains.identity.presentation.schemas import (
    AnonymousSessionResponse,
    MergeRequest,
    MergeResultResponse,
)

router = APIRouter()


@router.post(
    "/anonymous/sessions",
    response_model=AnonymousSessionResponse,
)
async def create_anonymous_session(
    issuer: AnonymousTokenIssuer = Depends(get_anonymous_token_issuer),
) -> AnonymousSessionResponse:
    """签发新的匿名会话 Token（不落库）"""
    token, identity = issuer.issue_with_identity()
    return AnonymousSessionResponse(
        anonymous_session_token=token,
        anonymous_user_id=identity.anon_id,
        expires_at=identity.expires_at,
    )


@router.post(
    "/users/me/merge-anonymous-data",
    response_model=MergeResultResponse,
    responses={
        400: {"model": MergeResultResponse, "description": "Invalid anonymous session token"},
        500: {"model": MergeResultResponse, "description": "Merge failed"},
    },
)
async def merge_anonymous_data(
    request: MergeRequest,
    account_id: AccountId,
    merge_service: AnonymousDataMergeService = Depends(get_merge_service),
) -> MergeResultResponse | JSONResponse:
    """
    将匿名会话期间的购物车与位置偏好合并到当前账号

    可重复调用：数据已合并后再次调用返回零计数的成功结果。
    """
    result = await merge_service.merge(account_id, request.anonymous_session_token)
    response = MergeResultResponse.from_result(result)
    if result.success:
        return response

    status_code = (
        status.HTTP_400_BAD_REQUEST
        if result.failure_reason == MergeFailureReason.INVALID_TOKEN
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=response.model_dump(by_alias=True))
