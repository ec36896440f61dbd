"""
清理过期的匿名数据

匿名会话 Token 过期后，对应的匿名购物车与位置偏好永远无法再被合并，
定期清理这些数据以释放数据库空间。可以通过 cron 或其他调度器定期运行。

使用方法:
    # 预览将要清理的数据（不执行删除）
    uv run python scripts/cleanup_stale_anonymous_data.py --dry-run

    # 清理超过 Token 有效期（默认 30 天）未更新的匿名数据
    uv run python scripts/cleanup_stale_anonymous_data.py

    # 清理 7 天前的匿名数据
    uv run python scripts/cleanup_stale_anonymous_data.py --days 7
"""

import argparse
import asyncio
from datetime import datetime, timedelta
from pathlib import Path
import sys

# 添加项目根目录到 Python 路径（必须在导入项目模块之前）
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete, func, select  # pylint: disable=wrong-import-position
from sqlalchemy.ext.asyncio import AsyncSession  # pylint: disable=wrong-import-position

from bootstrap.config import settings  # pylint: disable=wrong-import-position
from domains.cart.infrastructure.models import AnonymousCartItem  # pylint: disable=wrong-import-position
from domains.preference.infrastructure.models import (  # pylint: disable=wrong-import-position
    AnonymousUserPreference,
)
from libs.db.database import (  # pylint: disable=wrong-import-position
    close_db,
    get_session_context,
    init_db,
)
from libs.orm.base import utc_now  # pylint: disable=wrong-import-position

DEFAULT_DAYS = max(1, settings.anonymous_session_token_lifetime_minutes // (24 * 60))
BATCH_SIZE = 100


async def get_stale_cart_owners(session: AsyncSession, cutoff_date: datetime) -> list[tuple]:
    """获取购物车最后更新早于截止时间的匿名用户（anon_id, 条目数, 最后更新）"""
    result = await session.execute(
        select(
            AnonymousCartItem.anonymous_user_id,
            func.count(AnonymousCartItem.id),
            func.max(AnonymousCartItem.updated_at),
        )
        .group_by(AnonymousCartItem.anonymous_user_id)
        .having(func.max(AnonymousCartItem.updated_at) < cutoff_date)
        .order_by(func.max(AnonymousCartItem.updated_at).asc())
    )
    return list(result.all())


async def count_stale_preferences(session: AsyncSession, cutoff_date: datetime) -> int:
    """统计过期的匿名位置偏好"""
    result = await session.execute(
        select(func.count())
        .select_from(AnonymousUserPreference)
        .where(AnonymousUserPreference.updated_at < cutoff_date)
    )
    return result.scalar() or 0


async def delete_cart_items(session: AsyncSession, anonymous_user_ids: list[str]) -> int:
    """删除匿名用户的全部购物车条目"""
    if not anonymous_user_ids:
        return 0
    result = await session.execute(
        delete(AnonymousCartItem).where(AnonymousCartItem.anonymous_user_id.in_(anonymous_user_ids))
    )
    return result.rowcount or 0


async def delete_stale_preferences(session: AsyncSession, cutoff_date: datetime) -> int:
    """删除过期的匿名位置偏好"""
    result = await session.execute(
        delete(AnonymousUserPreference).where(AnonymousUserPreference.updated_at < cutoff_date)
    )
    return result.rowcount or 0


async def cleanup_stale_anonymous_data(days: int = DEFAULT_DAYS, dry_run: bool = True) -> None:
    """清理过期的匿名数据

    Args:
        days: 清理多少天前的数据
        dry_run: 如果为 True，只预览不执行删除
    """
    await init_db()
    cutoff_date = utc_now() - timedelta(days=days)

    try:
        async with get_session_context() as session:
            stale_owners = await get_stale_cart_owners(session, cutoff_date)
            stale_preferences = await count_stale_preferences(session, cutoff_date)

            if not stale_owners and not stale_preferences:
                print(f"没有找到 {days} 天前的匿名数据，无需清理。")
                return

            total_items = sum(owner[1] for owner in stale_owners)
            print(f"\n找到 {len(stale_owners)} 个过期的匿名购物车（共 {total_items} 个条目）")
            print(f"过期的匿名位置偏好: {stale_preferences} 条")
            print(f"截止日期: {cutoff_date.strftime('%Y-%m-%d %H:%M:%S')} ({days} 天前)")
            print("=" * 80)

            # 显示前 10 个
            for i, (anon_id, item_count, last_updated) in enumerate(stale_owners[:10]):
                print(
                    f"  {i + 1}. 匿名ID: {anon_id[:8]}... | "
                    f"条目: {item_count:<5} | "
                    f"更新: {last_updated.strftime('%Y-%m-%d')}"
                )

            if len(stale_owners) > 10:
                print(f"  ... 还有 {len(stale_owners) - 10} 个")

            print("=" * 80)

            if dry_run:
                print("\n[预览模式] 未执行任何删除操作")
                print("使用不带 --dry-run 参数执行实际清理")
                return

            # 分批删除
            owner_ids = [owner[0] for owner in stale_owners]
            total_deleted = 0
            for i in range(0, len(owner_ids), BATCH_SIZE):
                batch = owner_ids[i : i + BATCH_SIZE]
                deleted = await delete_cart_items(session, batch)
                total_deleted += deleted
                print(f"已删除批次 {i // BATCH_SIZE + 1}: {deleted} 个条目")

            deleted_preferences = await delete_stale_preferences(session, cutoff_date)

            print("\n" + "=" * 80)
            print("清理完成:")
            print(f"  - 删除购物车条目: {total_deleted} 个")
            print(f"  - 删除位置偏好: {deleted_preferences} 条")
    finally:
        await close_db()


def main():
    parser = argparse.ArgumentParser(description="清理过期的匿名购物车与位置偏好")
    parser.add_argument(
        "--days",
        "-d",
        type=int,
        default=DEFAULT_DAYS,
        help=f"清理多少天前的数据（默认: {DEFAULT_DAYS} 天，即匿名 Token 有效期）",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="预览模式，不执行删除",
    )

    args = parser.parse_args()
    asyncio.run(cleanup_stale_anonymous_data(days=args.days, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
