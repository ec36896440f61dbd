"""
Anonymous Session Token - 匿名会话令牌

实现:
- AnonymousSessionConfig: 签名配置（不可变，构造时校验）
- AnonymousTokenIssuer: 签发匿名会话 Token（无状态，不写库）
- AnonymousTokenValidator: 校验匿名会话 Token，任何凭据问题都返回 None

只有配置错误（缺少密钥、算法不支持、密钥格式错误）会抛出 ConfigurationError，
调用方无法区分 Token 被拒绝的具体原因。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
import uuid

import jwt
from jwt.algorithms import get_default_algorithms

from domains.identity.domain.types import (
    ANON_ID_CLAIM,
    ANONYMOUS_SESSION_SUBJECT_TYPE,
    SUBJECT_TYPE_CLAIM,
    AnonymousIdentity,
)
from exceptions import ConfigurationError
from utils.logging import get_logger

if TYPE_CHECKING:
    from bootstrap.config import Settings

logger = get_logger(__name__)

MIN_SECRET_LENGTH = 32


def _is_symmetric(algorithm: str) -> bool:
    return algorithm.upper().startswith("HS")


def _prepare_key(algorithm: str, key: str) -> Any:
    """按算法解析密钥，格式错误视为配置错误"""
    try:
        return get_default_algorithms()[algorithm].prepare_key(key)
    except (jwt.InvalidKeyError, ValueError, TypeError) as e:
        raise ConfigurationError(
            f"Anonymous session key is not valid for algorithm {algorithm}"
        ) from e


@dataclass(frozen=True, slots=True)
class AnonymousSessionConfig:
    """匿名会话 Token 配置

    对称算法（HS*）签发与校验使用同一密钥；
    非对称算法（RS*/ES*）签发使用私钥，校验使用公钥。
    """

    algorithm: str
    issuer: str
    audience: str
    signing_key: str | None
    verification_key: str | None
    token_lifetime: timedelta = timedelta(days=30)
    clock_skew: timedelta = timedelta(seconds=60)

    def __post_init__(self) -> None:
        missing = []
        if not self.issuer:
            missing.append("anonymous_session_issuer")
        if not self.audience:
            missing.append("anonymous_session_audience")
        if not self.signing_key and not self.verification_key:
            if _is_symmetric(self.algorithm):
                missing.append("anonymous_session_jwt_secret_key")
            else:
                missing.extend(["anonymous_session_private_key", "anonymous_session_public_key"])
        if missing:
            raise ConfigurationError(
                "Anonymous session configuration is missing: " + ", ".join(missing),
                missing=missing,
            )

        if self.algorithm not in get_default_algorithms():
            raise ConfigurationError(f"Unsupported anonymous session algorithm: {self.algorithm}")
        if _is_symmetric(self.algorithm) and len(self.signing_key or "") < MIN_SECRET_LENGTH:
            raise ConfigurationError(
                f"Anonymous session secret must be at least {MIN_SECRET_LENGTH} characters"
            )
        if self.token_lifetime <= timedelta(0):
            raise ConfigurationError("Anonymous session token lifetime must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> AnonymousSessionConfig:
        """从应用配置构建"""
        algorithm = settings.anonymous_session_algorithm
        if _is_symmetric(algorithm):
            secret = settings.anonymous_session_jwt_secret_key
            signing_key = secret.get_secret_value() if secret else None
            verification_key = signing_key
        else:
            private_key = settings.anonymous_session_private_key
            signing_key = private_key.get_secret_value() if private_key else None
            verification_key = settings.anonymous_session_public_key

        return cls(
            algorithm=algorithm,
            issuer=settings.anonymous_session_issuer or "",
            audience=settings.anonymous_session_audience or "",
            signing_key=signing_key,
            verification_key=verification_key,
            token_lifetime=timedelta(minutes=settings.anonymous_session_token_lifetime_minutes),
            clock_skew=timedelta(seconds=settings.anonymous_session_clock_skew_seconds),
        )


class AnonymousTokenIssuer:
    """匿名会话 Token 签发器"""

    def __init__(self, config: AnonymousSessionConfig) -> None:
        if not config.signing_key:
            raise ConfigurationError(
                "Anonymous session signing key is not configured",
                missing=["anonymous_session_private_key"],
            )
        self.config = config
        self._key = _prepare_key(config.algorithm, config.signing_key)

    def issue(self) -> str:
        """签发新的匿名会话 Token

        Returns:
            签名后的 JWT 字符串
        """
        token, _ = self.issue_with_identity()
        return token

    def issue_with_identity(self) -> tuple[str, AnonymousIdentity]:
        """签发 Token，并返回其中携带的匿名身份"""
        now = datetime.now(UTC).replace(microsecond=0)
        identity = AnonymousIdentity(
            anon_id=str(uuid.uuid4()),
            token_id=str(uuid.uuid4()),
            issued_at=now,
            expires_at=now + self.config.token_lifetime,
            issuer=self.config.issuer,
            audience=self.config.audience,
        )

        payload = {
            "jti": identity.token_id,
            "iat": identity.issued_at,
            "nbf": identity.issued_at,
            "exp": identity.expires_at,
            "iss": identity.issuer,
            "aud": identity.audience,
            SUBJECT_TYPE_CLAIM: ANONYMOUS_SESSION_SUBJECT_TYPE,
            ANON_ID_CLAIM: identity.anon_id,
        }
        token = jwt.encode(payload, self._key, algorithm=self.config.algorithm)

        logger.info("Issued anonymous session token for anon_id %s", identity.short_id)
        return token, identity


class AnonymousTokenValidator:
    """匿名会话 Token 校验器"""

    def __init__(self, config: AnonymousSessionConfig) -> None:
        if not config.verification_key:
            raise ConfigurationError(
                "Anonymous session verification key is not configured",
                missing=["anonymous_session_public_key"],
            )
        self.config = config
        self._key = _prepare_key(config.algorithm, config.verification_key)

    def decode(self, token: str | None) -> AnonymousIdentity | None:
        """校验 Token 并解析匿名身份

        依次校验签名、issuer、audience、有效期（允许时钟偏差），
        然后要求 sub_type 为匿名会话且 anon_id 非空。

        Returns:
            匿名身份，任何校验失败返回 None
        """
        if not token or not token.strip():
            logger.debug("Anonymous token is empty")
            return None

        try:
            payload = jwt.decode(
                token.strip(),
                self._key,
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
                audience=self.config.audience,
                leeway=self.config.clock_skew,
                options={"require": ["exp", "iat", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Anonymous token rejected: expired")
            return None
        except jwt.InvalidSignatureError:
            logger.warning("Anonymous token rejected: invalid signature")
            return None
        except jwt.InvalidKeyError as e:
            raise ConfigurationError("Anonymous session verification key is invalid") from e
        except jwt.InvalidTokenError as e:
            logger.warning("Anonymous token rejected: %s", e)
            return None

        if payload.get(SUBJECT_TYPE_CLAIM) != ANONYMOUS_SESSION_SUBJECT_TYPE:
            logger.warning("Anonymous token rejected: missing or unexpected '%s'", SUBJECT_TYPE_CLAIM)
            return None

        anon_id = payload.get(ANON_ID_CLAIM)
        if not isinstance(anon_id, str) or not anon_id.strip():
            logger.warning("Anonymous token rejected: missing '%s'", ANON_ID_CLAIM)
            return None

        return AnonymousIdentity(
            anon_id=anon_id,
            token_id=str(payload.get("jti", "")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            issuer=payload["iss"],
            audience=self.config.audience,
        )

    def validate(self, token: str | None) -> str | None:
        """校验 Token，返回匿名用户 ID

        Returns:
            anon_id，任何校验失败返回 None
        """
        identity = self.decode(token)
        if identity is None:
            return None
        logger.debug("Anonymous token validated for anon_id %s", identity.short_id)
        return identity.anon_id
