"""API - 共享 API 组件

跨领域共享的 API 组件：
- deps: 数据库和服务工厂依赖
- errors: 错误消息常量

身份认证相关依赖请使用：domains.identity.presentation.deps
"""

from libs.api.deps import (
    DbSession,
    get_anonymous_cart_service,
    get_anonymous_preference_service,
    get_catalog_lookup,
    get_db,
    get_user_cart_service,
    get_user_preference_service,
)
from libs.api.errors import (
    ANONYMOUS_TOKEN_REQUIRED,
    CONFIGURATION_ERROR,
    INTERNAL_ERROR,
    INVALID_ANONYMOUS_TOKEN,
    INVALID_TOKEN,
    UNAUTHORIZED,
)

__all__ = [
    # Errors
    "ANONYMOUS_TOKEN_REQUIRED",
    "CONFIGURATION_ERROR",
    "INTERNAL_ERROR",
    "INVALID_ANONYMOUS_TOKEN",
    "INVALID_TOKEN",
    "UNAUTHORIZED",
    # Database
    "DbSession",
    # Services
    "get_anonymous_cart_service",
    "get_anonymous_preference_service",
    "get_catalog_lookup",
    "get_db",
    "get_user_cart_service",
    "get_user_preference_service",
]
