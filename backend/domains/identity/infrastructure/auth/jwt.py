"""
JWT Token Management - 注册用户 JWT 令牌管理

注册用户的 Token 由认证服务签发，本服务只需校验 access token 并取出账号 ID。
create_access_token 保留给运维脚本和测试使用。
"""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt
from pydantic import BaseModel

from utils.logging import get_logger

if TYPE_CHECKING:
    from bootstrap.config import Settings

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


class TokenPayload(BaseModel):
    """Token 载荷"""

    sub: str  # 账号 ID
    exp: datetime  # 过期时间
    type: str  # token 类型
    iat: datetime | None = None  # 签发时间


class JWTManager:
    """JWT 管理器"""

    def __init__(self, config: "Settings") -> None:
        """
        初始化 JWT 管理器

        Args:
            config: 应用配置（通过依赖注入传入）
        """
        self.config = config

    @property
    def _secret(self) -> str:
        return self.config.jwt_secret_key.get_secret_value()

    def create_access_token(
        self,
        user_id: str,
        expires_delta: timedelta | None = None,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        """
        创建访问令牌

        Args:
            user_id: 账号 ID
            expires_delta: 过期时间增量
            extra_claims: 额外声明

        Returns:
            JWT Token
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.config.access_token_expire_minutes)

        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "exp": now + expires_delta,
            "iat": now,
            "type": ACCESS_TOKEN_TYPE,
        }
        if extra_claims:
            payload.update(extra_claims)

        return jwt.encode(payload, self._secret, algorithm=self.config.jwt_algorithm)

    def verify_token(self, token: str) -> TokenPayload | None:
        """
        验证访问令牌

        Args:
            token: JWT Token

        Returns:
            Token 载荷，验证失败返回 None
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.config.jwt_algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Access token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid access token: %s", e)
            return None

        # 检查 token 类型（匿名会话 Token 不能当作账号 Token 使用）
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            logger.warning(
                "Invalid token type: expected %s, got %s",
                ACCESS_TOKEN_TYPE,
                payload.get("type"),
            )
            return None

        return TokenPayload(
            sub=payload["sub"],
            exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
            type=payload["type"],
            iat=datetime.fromtimestamp(payload["iat"], tz=UTC) if payload.get("iat") else None,
        )
