"""
Pytest Configuration - 测试配置

提供测试所需的 fixtures：
- 内存 SQLite 数据库（每个测试独立建表/删表）
- 目录种子数据
- 匿名会话 Token 与账号 Token
- 覆盖了数据库与配置依赖的 HTTP 客户端
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
import uuid

from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from bootstrap.config import Settings
from domains.cart.infrastructure.models import AnonymousCartItem, UserCartItem  # noqa: F401
from domains.catalog.infrastructure.models.catalog import Shop, ShopService
from domains.identity.infrastructure.auth import (
    AnonymousSessionConfig,
    AnonymousTokenIssuer,
    AnonymousTokenValidator,
    JWTManager,
)
from domains.preference.infrastructure.models import (  # noqa: F401
    AnonymousUserPreference,
    UserPreference,
)
from libs.db.database import Base, create_session_factory

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ANONYMOUS_SECRET = "test-anonymous-session-secret-0123456789"
ACCOUNT_SECRET = "test-account-jwt-secret-0123456789abcdef"
TEST_ISSUER = "shopcart-test"
TEST_AUDIENCE = "shopcart-clients"


# =============================================================================
# 配置
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """测试配置（不读取 .env）"""
    return Settings(
        _env_file=None,
        app_env="development",
        database_url=TEST_DATABASE_URL,
        jwt_secret_key=SecretStr(ACCOUNT_SECRET),
        anonymous_session_jwt_secret_key=SecretStr(ANONYMOUS_SECRET),
        anonymous_session_issuer=TEST_ISSUER,
        anonymous_session_audience=TEST_AUDIENCE,
    )


@pytest.fixture
def anonymous_config() -> AnonymousSessionConfig:
    """匿名会话配置"""
    return AnonymousSessionConfig(
        algorithm="HS256",
        issuer=TEST_ISSUER,
        audience=TEST_AUDIENCE,
        signing_key=ANONYMOUS_SECRET,
        verification_key=ANONYMOUS_SECRET,
        token_lifetime=timedelta(days=30),
        clock_skew=timedelta(seconds=60),
    )


@pytest.fixture
def token_issuer(anonymous_config: AnonymousSessionConfig) -> AnonymousTokenIssuer:
    return AnonymousTokenIssuer(anonymous_config)


@pytest.fixture
def token_validator(anonymous_config: AnonymousSessionConfig) -> AnonymousTokenValidator:
    return AnonymousTokenValidator(anonymous_config)


@pytest.fixture
def jwt_manager(test_settings: Settings) -> JWTManager:
    return JWTManager(test_settings)


# =============================================================================
# 身份
# =============================================================================


@pytest.fixture
def anonymous_token(token_issuer: AnonymousTokenIssuer) -> str:
    """一个有效的匿名会话 Token"""
    return token_issuer.issue()


@pytest.fixture
def anonymous_user_id(anonymous_token: str, token_validator: AnonymousTokenValidator) -> str:
    """anonymous_token 对应的匿名用户 ID"""
    anon_id = token_validator.validate(anonymous_token)
    assert anon_id is not None
    return anon_id


@pytest.fixture
def anonymous_headers(anonymous_token: str) -> dict[str, str]:
    return {"X-Anonymous-Token": anonymous_token}


@pytest.fixture
def account_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def auth_headers(account_id: str, jwt_manager: JWTManager) -> dict[str, str]:
    """账号认证头"""
    return {"Authorization": f"Bearer {jwt_manager.create_access_token(account_id)}"}


# =============================================================================
# 数据库
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """数据库会话 fixture（内存 SQLite，每个测试独立）"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@dataclass(frozen=True)
class CatalogSeed:
    """目录种子数据"""

    shop_id: uuid.UUID
    other_shop_id: uuid.UUID
    haircut_id: uuid.UUID  # 店铺自定义图标
    beard_trim_id: uuid.UUID  # 只有全局默认图标
    retired_service_id: uuid.UUID  # 已下架
    other_shop_service_id: uuid.UUID


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession) -> CatalogSeed:
    """目录种子数据 fixture"""
    shop = Shop(name_en="Gold Scissors", name_ar="المقص الذهبي")
    other_shop = Shop(name_en="Blue Comb", name_ar="المشط الأزرق")
    db_session.add_all([shop, other_shop])
    await db_session.flush()

    haircut = ShopService(
        shop_id=shop.id,
        effective_name_en="Haircut",
        effective_name_ar="قص الشعر",
        price=Decimal("15.00"),
        duration_minutes=30,
        shop_specific_icon_url="https://cdn.example.com/shops/gold/haircut.png",
        default_icon_url="https://cdn.example.com/services/haircut.png",
    )
    beard_trim = ShopService(
        shop_id=shop.id,
        effective_name_en="Beard Trim",
        effective_name_ar="تشذيب اللحية",
        price=Decimal("7.50"),
        duration_minutes=15,
        default_icon_url="https://cdn.example.com/services/beard.png",
    )
    retired = ShopService(
        shop_id=shop.id,
        effective_name_en="Hot Towel",
        effective_name_ar="منشفة ساخنة",
        price=Decimal("5.00"),
        is_offered_by_shop=False,
    )
    other_service = ShopService(
        shop_id=other_shop.id,
        effective_name_en="Haircut",
        effective_name_ar="قص الشعر",
        price=Decimal("20.00"),
    )
    db_session.add_all([haircut, beard_trim, retired, other_service])
    await db_session.commit()

    return CatalogSeed(
        shop_id=shop.id,
        other_shop_id=other_shop.id,
        haircut_id=haircut.id,
        beard_trim_id=beard_trim.id,
        retired_service_id=retired.id,
        other_shop_service_id=other_service.id,
    )


# =============================================================================
# HTTP 客户端
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    test_settings: Settings,
    anonymous_config: AnonymousSessionConfig,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP 客户端 fixture

    ASGITransport 不触发 lifespan，数据库与配置全部通过依赖覆盖注入。
    """
    # pylint: disable=import-outside-toplevel
    from bootstrap.config import get_settings
    from bootstrap.main import app
    from domains.identity.presentation.deps import get_anonymous_session_config
    from libs.api.deps import get_db

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_anonymous_session_config] = lambda: anonymous_config

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
