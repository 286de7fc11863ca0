"""Initial marketplace schema for TatVivah

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates every table of the marketplace:
- Accounts: users, login sessions, email OTPs
- Catalog: categories, products, variants, moderation, inventory and its ledger
- Commerce: carts, orders, payments, settlements, shipments
- Operations: notifications, audit logs, reviews, bestsellers

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), nullable=False))
    return columns


def upgrade() -> None:
    """Create all tables."""

    # Accounts
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False),
        sa.Column("is_phone_verified", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_phone", "phone", unique=True),
        sa.Index("ix_users_role", "role"),
        sa.Index("ix_users_status", "status"),
        sa.Index("ix_users_created_at", "created_at"),
    )

    op.create_table(
        "login_sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("refresh_token", sa.String(255), nullable=False),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_login_sessions_user_id", "user_id"),
        sa.Index("ix_login_sessions_created_at", "created_at"),
    )

    op.create_table(
        "email_otps",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("code_hash", sa.String(64), nullable=False),
        sa.Column("purpose", sa.String(32), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_email_otps_user_id", "user_id"),
        sa.Index("ix_email_otps_email", "email"),
        sa.Index("ix_email_otps_created_at", "created_at"),
    )

    # Catalog
    op.create_table(
        "categories",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_categories_slug", "slug", unique=True),
        sa.Index("ix_categories_is_active", "is_active"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("seller_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("category_id", sa.String(64), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("deleted_by_admin", sa.Boolean(), nullable=False),
        sa.Column("deleted_by_admin_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_products_seller_id", "seller_id"),
        sa.Index("ix_products_category_id", "category_id"),
        sa.Index("ix_products_is_published", "is_published"),
        sa.Index("ix_products_deleted_by_admin", "deleted_by_admin"),
        sa.Index("ix_products_created_at", "created_at"),
    )

    op.create_table(
        "product_variants",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(64), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("sku", sa.String(100), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("compare_at_price", sa.Float(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_product_variants_product_id", "product_id"),
        sa.Index("ix_product_variants_sku", "sku", unique=True),
    )

    op.create_table(
        "product_moderations",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(64), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.String(64), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_product_moderations_product_id", "product_id", unique=True),
        sa.Index("ix_product_moderations_status", "status"),
        sa.Index("ix_product_moderations_created_at", "created_at"),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("variant_id", sa.String(64), sa.ForeignKey("product_variants.id"), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),
        sa.Index("ix_inventory_variant_id", "variant_id", unique=True),
    )

    op.create_table(
        "inventory_movements",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("variant_id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_inventory_movements_variant_id", "variant_id"),
        sa.Index("ix_inventory_movements_order_id", "order_id"),
        sa.Index("ix_inventory_movements_created_at", "created_at"),
    )

    # Commerce
    op.create_table(
        "carts",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_carts_user_id", "user_id", unique=True),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("cart_id", sa.String(64), sa.ForeignKey("carts.id"), nullable=False),
        sa.Column("product_id", sa.String(64), nullable=False),
        sa.Column("variant_id", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_snapshot", sa.Float(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cart_id", "variant_id", name="uq_cart_items_cart_variant"),
        sa.Index("ix_cart_items_cart_id", "cart_id"),
        sa.Index("ix_cart_items_variant_id", "variant_id"),
        sa.Index("ix_cart_items_created_at", "created_at"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("shipping_fee", sa.Float(), nullable=False),
        sa.Column("shipping_name", sa.String(255), nullable=True),
        sa.Column("shipping_phone", sa.String(32), nullable=True),
        sa.Column("shipping_email", sa.String(255), nullable=True),
        sa.Column("shipping_address_line1", sa.String(255), nullable=True),
        sa.Column("shipping_address_line2", sa.String(255), nullable=True),
        sa.Column("shipping_city", sa.String(128), nullable=True),
        sa.Column("shipping_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_orders_user_id", "user_id"),
        sa.Index("ix_orders_status", "status"),
        sa.Index("ix_orders_created_at", "created_at"),
    )

    op.create_table(
        "order_items",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("seller_id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(64), nullable=False),
        sa.Column("variant_id", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_snapshot", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_order_items_order_id", "order_id"),
        sa.Index("ix_order_items_seller_id", "seller_id"),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("provider", sa.String(16), nullable=False),
        sa.Column("provider_payment_id", sa.String(128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payments_order_id", "order_id", unique=True),
        sa.Index("ix_payments_user_id", "user_id"),
        sa.Index("ix_payments_status", "status"),
        sa.Index("ix_payments_provider_payment_id", "provider_payment_id"),
        sa.Index("ix_payments_created_at", "created_at"),
    )

    op.create_table(
        "payment_events",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("payment_id", sa.String(64), sa.ForeignKey("payments.id"), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payment_events_payment_id", "payment_id"),
    )

    op.create_table(
        "seller_settlements",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("seller_id", sa.String(64), nullable=False),
        sa.Column("order_item_id", sa.String(64), sa.ForeignKey("order_items.id"), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_seller_settlements_seller_id", "seller_id"),
        sa.Index("ix_seller_settlements_order_item_id", "order_item_id", unique=True),
        sa.Index("ix_seller_settlements_created_at", "created_at"),
    )

    op.create_table(
        "shipments",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("seller_id", sa.String(64), nullable=False),
        sa.Column("carrier", sa.String(100), nullable=False),
        sa.Column("tracking_number", sa.String(100), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("shipped_at", sa.DateTime(), nullable=True),
        sa.Column("delivered_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_shipments_order_id", "order_id"),
        sa.Index("ix_shipments_seller_id", "seller_id"),
        sa.Index("ix_shipments_created_at", "created_at"),
    )

    op.create_table(
        "shipment_events",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("shipment_id", sa.String(64), sa.ForeignKey("shipments.id"), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_shipment_events_shipment_id", "shipment_id"),
        sa.Index("ix_shipment_events_created_at", "created_at"),
    )

    # Operations
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("role", sa.String(16), nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("channel", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_type", "type"),
        sa.Index("ix_notifications_status", "status"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    op.create_table(
        "notification_events",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("notification_id", sa.String(64), sa.ForeignKey("notifications.id"), nullable=False),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("provider_message_id", sa.String(128), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_notification_events_notification_id", "notification_id"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("actor_id", sa.String(64), nullable=False),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("entity_type", sa.String(16), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_audit_logs_actor_id", "actor_id"),
        sa.Index("ix_audit_logs_entity_type", "entity_type"),
        sa.Index("ix_audit_logs_entity_id", "entity_id"),
        sa.Index("ix_audit_logs_created_at", "created_at"),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(64), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        sa.Index("ix_reviews_product_id", "product_id"),
        sa.Index("ix_reviews_user_id", "user_id"),
        sa.Index("ix_reviews_created_at", "created_at"),
    )

    op.create_table(
        "bestsellers",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(64), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_bestsellers_product_id", "product_id", unique=True),
        sa.Index("ix_bestsellers_position", "position"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade, children first."""
    for table in (
        "bestsellers",
        "reviews",
        "audit_logs",
        "notification_events",
        "notifications",
        "shipment_events",
        "shipments",
        "seller_settlements",
        "payment_events",
        "payments",
        "order_items",
        "orders",
        "cart_items",
        "carts",
        "inventory_movements",
        "inventory",
        "product_moderations",
        "product_variants",
        "products",
        "categories",
        "email_otps",
        "login_sessions",
        "users",
    ):
        op.drop_table(table)
