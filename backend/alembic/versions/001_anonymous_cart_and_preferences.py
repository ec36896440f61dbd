"""anonymous and user cart items, location preferences

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _cart_item_columns(owner_column: str) -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(owner_column, sa.String(100), nullable=False),
        sa.Column("shop_id", sa.Uuid(), nullable=False),
        sa.Column("shop_service_id", sa.Uuid(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_at_addition", sa.Numeric(18, 2), nullable=False),
        sa.Column("service_name_snapshot_en", sa.String(200), nullable=False),
        sa.Column("service_name_snapshot_ar", sa.String(200), nullable=False),
        sa.Column("shop_name_snapshot_en", sa.String(200), nullable=True),
        sa.Column("shop_name_snapshot_ar", sa.String(200), nullable=True),
        sa.Column("service_image_url_snapshot", sa.String(500), nullable=True),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _preference_columns(owner_column: str) -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(owner_column, sa.String(100), nullable=False),
        sa.Column("last_known_latitude", sa.Float(), nullable=True),
        sa.Column("last_known_longitude", sa.Float(), nullable=True),
        sa.Column("last_known_location_accuracy", sa.Float(), nullable=True),
        sa.Column("location_source", sa.String(50), nullable=True),
        sa.Column("last_set_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "other_preferences",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """创建匿名/用户购物车表与位置偏好表"""
    for table, owner, prefix in (
        ("anonymous_cart_items", "anonymous_user_id", "anonymous_cart_items"),
        ("user_cart_items", "user_id", "user_cart_items"),
    ):
        op.create_table(
            table,
            *_cart_item_columns(owner),
            sa.UniqueConstraint(
                owner,
                "shop_id",
                "shop_service_id",
                name=f"uq_{prefix}_owner_service",
            ),
            sa.CheckConstraint("quantity > 0", name=f"ck_{prefix}_quantity_positive"),
        )
        op.create_index(f"ix_{table}_{owner}", table, [owner])

    for table, owner in (
        ("anonymous_user_preferences", "anonymous_user_id"),
        ("user_preferences", "user_id"),
    ):
        op.create_table(table, *_preference_columns(owner))
        op.create_index(f"ix_{table}_{owner}", table, [owner], unique=True)

    # 清理脚本按 updated_at 查找过期匿名数据
    op.create_index(
        "ix_anonymous_cart_items_updated_at",
        "anonymous_cart_items",
        ["updated_at"],
    )
    op.create_index(
        "ix_anonymous_user_preferences_updated_at",
        "anonymous_user_preferences",
        ["updated_at"],
    )


def downgrade() -> None:
    op.drop_table("user_preferences")
    op.drop_table("anonymous_user_preferences")
    op.drop_table("user_cart_items")
    op.drop_table("anonymous_cart_items")
