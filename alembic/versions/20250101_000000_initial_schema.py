"""
Initial schema with uuid-ossp extension and store tables.

Revision ID: 20250101_000000_initial_schema
Revises:
Create Date: 2025-01-01 00:00:00
"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20250101_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("uuid_generate_v4()"),
    )


def upgrade() -> None:
    # Required extension for uuid_generate_v4
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp";')

    # users
    op.create_table(
        "users",
        _id(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("reset_token", sa.String(length=255), nullable=True),
        sa.Column("reset_token_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "permissions",
            postgresql.ARRAY(sa.String(length=32)),
            nullable=False,
            server_default=sa.text("ARRAY['USER']::varchar[]"),
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_index("idx_users_reset_token", "users", ["reset_token"])

    # items
    op.create_table(
        "items",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("large_image", sa.Text(), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="items_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="items_pkey"),
        sa.CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
    )
    op.create_index("idx_items_user", "items", ["user_id"])

    # cart_items
    op.create_table(
        "cart_items",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("item_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="cart_items_user_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["item_id"], ["items.id"], ondelete="CASCADE", name="cart_items_item_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="cart_items_pkey"),
        sa.UniqueConstraint("user_id", "item_id", name="cart_items_user_id_item_id_key"),
        sa.CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    # orders
    op.create_table(
        "orders",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("charge", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="orders_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="orders_pkey"),
        sa.UniqueConstraint("charge", name="orders_charge_key"),
    )
    op.create_index("idx_orders_user", "orders", ["user_id"])

    # order_items
    op.create_table(
        "order_items",
        _id(),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("item_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("large_image", sa.Text(), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["order_id"], ["orders.id"], ondelete="CASCADE", name="order_items_order_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="order_items_user_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["item_id"], ["items.id"], ondelete="SET NULL", name="order_items_item_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="order_items_pkey"),
    )
    op.create_index("idx_order_items_order", "order_items", ["order_id"])


def downgrade() -> None:
    op.drop_index("idx_order_items_order", table_name="order_items")
    op.drop_table("order_items")
    op.drop_index("idx_orders_user", table_name="orders")
    op.drop_table("orders")
    op.drop_table("cart_items")
    op.drop_index("idx_items_user", table_name="items")
    op.drop_table("items")
    op.drop_index("idx_users_reset_token", table_name="users")
    op.drop_table("users")
