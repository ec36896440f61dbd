"""
Auth Infrastructure - 认证基础设施

提供:
- 匿名会话 Token 签发与校验
- 注册用户 access token 校验
"""

from domains.identity.infrastructure.auth.anonymous_session import (
    AnonymousSessionConfig,
    AnonymousTokenIssuer,
    AnonymousTokenValidator,
)
from domains.identity.infrastructure.auth.jwt import JWTManager, TokenPayload

__all__ = [
    "AnonymousSessionConfig",
    "AnonymousTokenIssuer",
    "AnonymousTokenValidator",
    "JWTManager",
    "TokenPayload",
]
