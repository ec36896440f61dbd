"""
Anonymous Data Merge Service - 匿名数据合并服务

用户登录或注册后，将匿名会话期间的购物车与位置偏好合并到正式账号下。

合并在同一事务内完成：
1. 锁定账号购物车条目，DELETE ... RETURNING 取走匿名条目
2. 相同 (shop, service) 的条目累加数量，其余条目以 upsert 写入账号（保留原 added_at）
3. DELETE ... RETURNING 取走匿名位置偏好，较新的位置覆盖账号位置
4. 提交

匿名数据被"取走"即删除，所以并发的两次合并只有一次能拿到数据，
重复调用也只会得到零计数的成功结果。
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from domains.cart.domain.repositories.cart_repository import CartRepository
from domains.cart.domain.types import CartLineSnapshot
from domains.cart.infrastructure.repositories import AnonymousCartRepository, UserCartRepository
from domains.identity.domain.types import MergeDetails, MergeFailureReason, MergeResult
from domains.identity.infrastructure.auth.anonymous_session import AnonymousTokenValidator
from domains.preference.domain.repositories.preference_repository import PreferenceRepository
from domains.preference.domain.types import LocationUpdate
from domains.preference.infrastructure.repositories import (
    AnonymousPreferenceRepository,
    UserPreferenceRepository,
)
from utils.logging import get_logger

logger = get_logger(__name__)

MSG_NO_SESSION = "No anonymous session to merge."
MSG_INVALID_TOKEN = "Invalid anonymous session token."
MSG_MERGED = "Anonymous data merged successfully."
MSG_NOTHING_TO_MERGE = "No anonymous data found to merge."
MSG_STORAGE_ERROR = "Error saving merged data."
MSG_UNEXPECTED_ERROR = "An unexpected error occurred during merge."


class AnonymousDataMergeService:
    """匿名数据合并服务"""

    def __init__(
        self,
        db: AsyncSession,
        validator: AnonymousTokenValidator,
        anonymous_cart_repo: CartRepository[str] | None = None,
        user_cart_repo: CartRepository[str] | None = None,
        anonymous_preference_repo: PreferenceRepository[str] | None = None,
        user_preference_repo: PreferenceRepository[str] | None = None,
    ) -> None:
        self.db = db
        self.validator = validator
        self.anonymous_cart_repo = anonymous_cart_repo or AnonymousCartRepository(db)
        self.user_cart_repo = user_cart_repo or UserCartRepository(db)
        self.anonymous_preference_repo = (
            anonymous_preference_repo or AnonymousPreferenceRepository(db)
        )
        self.user_preference_repo = user_preference_repo or UserPreferenceRepository(db)

    async def merge(self, account_id: str, anonymous_token: str | None) -> MergeResult:
        """合并匿名数据到账号

        Args:
            account_id: 正式用户 ID
            anonymous_token: 匿名会话 Token（可为空）

        Returns:
            合并结果；Token 无效或存储失败时 success=False，且不改变任何数据
        """
        if not anonymous_token or not anonymous_token.strip():
            return MergeResult(success=True, message=MSG_NO_SESSION)

        anonymous_user_id = self.validator.validate(anonymous_token)
        if anonymous_user_id is None:
            logger.warning("Merge rejected for user %s: invalid anonymous token", account_id)
            return MergeResult.failed(MSG_INVALID_TOKEN, MergeFailureReason.INVALID_TOKEN)

        try:
            details, found_any = await self._merge_in_transaction(account_id, anonymous_user_id)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(
                "Database error merging anonymous user %s into user %s",
                anonymous_user_id[:8],
                account_id,
            )
            return MergeResult.failed(MSG_STORAGE_ERROR, MergeFailureReason.STORAGE_ERROR)
        except Exception:
            await self.db.rollback()
            logger.exception(
                "Unexpected error merging anonymous user %s into user %s",
                anonymous_user_id[:8],
                account_id,
            )
            return MergeResult.failed(MSG_UNEXPECTED_ERROR, MergeFailureReason.STORAGE_ERROR)

        if not found_any:
            logger.info(
                "No anonymous data for %s to merge into user %s",
                anonymous_user_id[:8],
                account_id,
            )
            return MergeResult(success=True, message=MSG_NOTHING_TO_MERGE, details=details)

        logger.info(
            "Merged anonymous user %s into user %s: %d transferred, %d duplicates, preferences=%s",
            anonymous_user_id[:8],
            account_id,
            details.cart_items_transferred,
            details.duplicates_handled,
            details.preferences_transferred,
        )
        return MergeResult(success=True, message=MSG_MERGED, details=details)

    async def _merge_in_transaction(
        self,
        account_id: str,
        anonymous_user_id: str,
    ) -> tuple[MergeDetails, bool]:
        details = MergeDetails()

        # 先锁账号条目，再取走匿名条目
        account_lines = await self.user_cart_repo.list_lines(account_id, for_update=True)
        existing = {(line.shop_id, line.shop_service_id): line for line in account_lines}
        anonymous_lines = await self.anonymous_cart_repo.claim_all(anonymous_user_id)

        for row in anonymous_lines:
            key = (row["shop_id"], row["shop_service_id"])
            account_line = existing.get(key)
            if account_line is not None:
                await self.user_cart_repo.set_quantity(
                    account_line,
                    account_line.quantity + row["quantity"],
                )
                details.duplicates_handled += 1
                continue

            # 锁只覆盖已有条目，合并期间并发加入的同一服务由 ON CONFLICT 累加
            await self.user_cart_repo.add_or_increment(
                account_id,
                shop_id=row["shop_id"],
                shop_service_id=row["shop_service_id"],
                quantity=row["quantity"],
                snapshot=CartLineSnapshot(
                    price_at_addition=row["price_at_addition"],
                    service_name_snapshot_en=row["service_name_snapshot_en"],
                    service_name_snapshot_ar=row["service_name_snapshot_ar"],
                    shop_name_snapshot_en=row["shop_name_snapshot_en"],
                    shop_name_snapshot_ar=row["shop_name_snapshot_ar"],
                    service_image_url_snapshot=row["service_image_url_snapshot"],
                ),
                added_at=row["added_at"],
            )
            details.cart_items_transferred += 1

        anonymous_location = await self.anonymous_preference_repo.claim(anonymous_user_id)
        if anonymous_location is not None:
            details.preferences_transferred = await self._merge_location(
                account_id,
                anonymous_location,
            )

        return details, bool(anonymous_lines) or anonymous_location is not None

    async def _merge_location(self, account_id: str, anonymous_location: LocationUpdate) -> bool:
        """较新的匿名位置覆盖账号位置（相同时间保留账号位置）"""
        record = await self.user_preference_repo.get_or_create(account_id)

        newer = record.last_set_at is None or (
            anonymous_location.set_at is not None
            and anonymous_location.set_at > record.last_set_at
        )
        if anonymous_location.has_coordinates and newer:
            await self.user_preference_repo.apply_location(record, anonymous_location)
            return True

        await self.user_preference_repo.touch(record)
        return False
