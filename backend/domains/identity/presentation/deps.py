"""
Identity Presentation Dependencies - 身份认证依赖注入

提供身份认证相关的 FastAPI 依赖：
- 匿名会话配置、签发器、校验器
- 匿名用户 ID（来自 X-Anonymous-Token 请求头）
- 注册用户 ID（来自 Authorization: Bearer）
- 匿名数据合并服务
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bootstrap.config import Settings, get_settings
from domains.identity.application.anonymous_data_merge_service import AnonymousDataMergeService
from domains.identity.domain.types import ANONYMOUS_TOKEN_HEADER
from domains.identity.infrastructure.auth import (
    AnonymousSessionConfig,
    AnonymousTokenIssuer,
    AnonymousTokenValidator,
    JWTManager,
)
from libs.api.deps import DbSession
from libs.api.errors import (
    ANONYMOUS_TOKEN_REQUIRED,
    INVALID_ANONYMOUS_TOKEN,
    INVALID_TOKEN,
    UNAUTHORIZED,
)

__all__ = [
    "AccountId",
    "AnonymousUserId",
    "get_anonymous_session_config",
    "get_anonymous_token_issuer",
    "get_anonymous_token_validator",
    "get_anonymous_user_id",
    "get_current_account_id",
    "get_jwt_manager",
    "get_merge_service",
]

security = HTTPBearer(auto_error=False)


# =============================================================================
# 匿名会话
# =============================================================================


@lru_cache
def get_anonymous_session_config() -> AnonymousSessionConfig:
    """匿名会话配置（进程内缓存；配置错误抛出 ConfigurationError）"""
    return AnonymousSessionConfig.from_settings(get_settings())


def get_anonymous_token_issuer(
    config: AnonymousSessionConfig = Depends(get_anonymous_session_config),
) -> AnonymousTokenIssuer:
    """获取匿名 Token 签发器"""
    return AnonymousTokenIssuer(config)


def get_anonymous_token_validator(
    config: AnonymousSessionConfig = Depends(get_anonymous_session_config),
) -> AnonymousTokenValidator:
    """获取匿名 Token 校验器"""
    return AnonymousTokenValidator(config)


async def get_anonymous_user_id(
    token: str | None = Header(default=None, alias=ANONYMOUS_TOKEN_HEADER),
    validator: AnonymousTokenValidator = Depends(get_anonymous_token_validator),
) -> str:
    """从请求头解析匿名用户 ID"""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ANONYMOUS_TOKEN_REQUIRED,
        )
    anonymous_user_id = validator.validate(token)
    if anonymous_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_ANONYMOUS_TOKEN,
        )
    return anonymous_user_id


AnonymousUserId = Annotated[str, Depends(get_anonymous_user_id)]


# =============================================================================
# 注册用户
# =============================================================================


def get_jwt_manager(config: Settings = Depends(get_settings)) -> JWTManager:
    """获取 JWT 管理器"""
    return JWTManager(config)


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
) -> str:
    """从 Bearer Token 解析注册用户 ID"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = jwt_manager.verify_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload.sub


AccountId = Annotated[str, Depends(get_current_account_id)]


# =============================================================================
# 服务依赖
# =============================================================================


async def get_merge_service(
    db: DbSession,
    validator: AnonymousTokenValidator = Depends(get_anonymous_token_validator),
) -> AnonymousDataMergeService:
    """获取匿名数据合并服务"""
    return AnonymousDataMergeService(db, validator)
