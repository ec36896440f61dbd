"""
Identity Domain Types - 身份域类型定义

包含身份识别相关的核心类型：
- AnonymousIdentity: 匿名身份（只存在于签名 Token 中，从不落库）
- MergeResult: 匿名数据合并结果
- 匿名会话 Token 常量
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

# ============================================================================
# 匿名会话常量
# ============================================================================

ANONYMOUS_TOKEN_HEADER = "X-Anonymous-Token"
"""匿名会话 Token 所在的请求头"""

SUBJECT_TYPE_CLAIM = "sub_type"
"""区分 Token 种类的声明名"""

ANONYMOUS_SESSION_SUBJECT_TYPE = "anonymous_session"
"""匿名会话 Token 的 sub_type 取值，与注册用户 Token 区分"""

ANON_ID_CLAIM = "anon_id"
"""匿名用户 ID 声明名"""


# ============================================================================
# AnonymousIdentity（匿名身份）
# ============================================================================


@dataclass(frozen=True, slots=True)
class AnonymousIdentity:
    """Anonymous visitor identity carried by a signed token.

    持有有效 Token 即代表该匿名身份；Token 丢失即身份丢失。
    """

    anon_id: str
    token_id: str
    issued_at: datetime
    expires_at: datetime
    issuer: str
    audience: str

    @property
    def short_id(self) -> str:
        """日志用的截断 ID"""
        return self.anon_id[:8]


# ============================================================================
# MergeResult（合并结果）
# ============================================================================


@dataclass(slots=True)
class MergeDetails:
    """合并统计"""

    cart_items_transferred: int = 0
    duplicates_handled: int = 0  # 与注册用户已有条目合并数量的条目数
    preferences_transferred: bool = False


class MergeFailureReason(StrEnum):
    """合并失败原因"""

    INVALID_TOKEN = "invalid_token"
    STORAGE_ERROR = "storage_error"


@dataclass(slots=True)
class MergeResult:
    """匿名数据合并结果（不落库，只返回给调用方一次）"""

    success: bool
    message: str
    details: MergeDetails = field(default_factory=MergeDetails)
    failure_reason: MergeFailureReason | None = None

    @classmethod
    def failed(cls, message: str, reason: MergeFailureReason) -> MergeResult:
        """构造失败结果（计数全部为零）"""
        return cls(success=False, message=message, failure_reason=reason)
