"""
ShopCart Backend - Main Application

FastAPI 应用入口点
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bootstrap.config import settings

# 从各领域的 presentation 层导入路由
from domains.cart.presentation import anonymous_cart_router, user_cart_router
from domains.identity.presentation.deps import get_anonymous_session_config
from domains.identity.presentation.router import router as identity_router
from domains.preference.presentation import (
    anonymous_preference_router,
    user_preference_router,
)
from exceptions import ConfigurationError, NotFoundError
from libs.api.errors import CONFIGURATION_ERROR
from libs.db.database import close_db, init_db
from libs.middleware import ErrorHandlerMiddleware
from utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _check_anonymous_session_config() -> None:
    """启动时校验匿名会话配置

    生产环境配置错误直接终止启动；其他环境只记录错误，
    匿名会话相关请求会返回 500。
    """
    try:
        get_anonymous_session_config()
    except ConfigurationError as e:
        if settings.is_production:
            raise
        logger.error("Anonymous session configuration invalid: %s", e)


@asynccontextmanager
async def lifespan(_fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        is_development=settings.is_development,
    )

    logger.info("=" * 60)
    logger.info("Starting %s", settings.app_name)
    logger.info("  APP_ENV: %s (is_development=%s)", settings.app_env, settings.is_development)
    logger.info("  DEBUG: %s", settings.debug)
    logger.info("=" * 60)

    _check_anonymous_session_config()

    # 初始化数据库
    await init_db()

    yield

    # 关闭时
    await close_db()


# 创建 FastAPI 应用
app = FastAPI(
    title=settings.app_name,
    description="匿名购物车与账号合并后端 API",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ErrorHandlerMiddleware)


# =============================================================================
# 全局异常处理器
# =============================================================================


def _error_response(
    status_code: int,
    message: str,
    code: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """构建错误响应"""
    content: dict[str, Any] = {"detail": message}
    if code:
        content["code"] = code
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(NotFoundError)
async def not_found_error_handler(
    _request: Request,
    exc: NotFoundError,
) -> JSONResponse:
    """处理资源不存在错误"""
    logger.warning("Resource not found: %s", exc.message)
    return _error_response(
        status_code=status.HTTP_404_NOT_FOUND,
        message=exc.message,
        code=exc.code,
        details=exc.details,
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request,
    exc: ConfigurationError,
) -> JSONResponse:
    """处理配置错误（不向客户端暴露细节）"""
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return _error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=CONFIGURATION_ERROR,
        code=exc.code,
    )


# =============================================================================
# 路由
# =============================================================================

app.include_router(identity_router, prefix=settings.api_prefix, tags=["Identity"])
app.include_router(
    anonymous_cart_router,
    prefix=f"{settings.api_prefix}/anonymous/cart",
    tags=["Anonymous Cart"],
)
app.include_router(
    user_cart_router,
    prefix=f"{settings.api_prefix}/users/me/cart",
    tags=["User Cart"],
)
app.include_router(
    anonymous_preference_router,
    prefix=f"{settings.api_prefix}/anonymous/preferences",
    tags=["Anonymous Preferences"],
)
app.include_router(
    user_preference_router,
    prefix=f"{settings.api_prefix}/users/me/preferences",
    tags=["User Preferences"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """健康检查"""
    return {"status": "healthy", "version": "0.1.0"}

