"""
Identity Domain - 身份识别领域

包含领域模型、值对象和常量
"""

from domains.identity.domain.types import (
    ANON_ID_CLAIM,
    ANONYMOUS_SESSION_SUBJECT_TYPE,
    ANONYMOUS_TOKEN_HEADER,
    SUBJECT_TYPE_CLAIM,
    AnonymousIdentity,
    MergeDetails,
    MergeFailureReason,
    MergeResult,
)

__all__ = [
    "ANONYMOUS_SESSION_SUBJECT_TYPE",
    "ANONYMOUS_TOKEN_HEADER",
    "ANON_ID_CLAIM",
    "SUBJECT_TYPE_CLAIM",
    "AnonymousIdentity",
    "MergeDetails",
    "MergeFailureReason",
    "MergeResult",
]
