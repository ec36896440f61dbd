"""
Identity Presentation Schemas - 身份表示层模式

请求/响应字段使用 camelCase。
"""

from datetime import datetime

from pydantic import Field

from domains.identity.domain.types import MergeResult
from libs.api.schemas import CamelModel

# =============================================================================
# 匿名会话
# =============================================================================


class AnonymousSessionResponse(CamelModel):
    """匿名会话签发响应"""

    anonymous_session_token: str
    anonymous_user_id: str
    expires_at: datetime


# =============================================================================
# 匿名数据合并
# =============================================================================


class MergeRequest(CamelModel):
    """匿名数据合并请求"""

    anonymous_session_token: str | None = Field(
        default=None,
        description="登录前使用的匿名会话 Token",
    )


class MergeDetailsResponse(CamelModel):
    """合并统计"""

    cart_items_transferred: int = 0
    duplicates_handled: int = 0
    preferences_transferred: bool = False


class MergeResultResponse(CamelModel):
    """合并结果"""

    success: bool
    message: str
    details: MergeDetailsResponse

    @classmethod
    def from_result(cls, result: MergeResult) -> "MergeResultResponse":
        return cls(
            success=result.success,
            message=result.message,
            details=MergeDetailsResponse.model_validate(result.details),
        )
