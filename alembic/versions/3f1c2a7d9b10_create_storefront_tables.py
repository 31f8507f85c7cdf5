"""create storefront tables

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2025-03-14 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func

# revision identifiers, used by Alembic.
revision: str = '3f1c2a7d9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=func.now()),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("telefone", sa.String(), nullable=True),
        sa.Column("cpf", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="cliente"),
        sa.Column("can_login", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_telefone", "users", ["telefone"], unique=True)
    op.create_index("ix_users_cpf", "users", ["cpf"], unique=True)

    op.create_table(
        "brands",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=func.now()),
    )

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(), nullable=False),
        sa.Column("gender_id", sa.Integer(), nullable=False),
        sa.Column("marca", sa.String(), nullable=False),
        sa.Column("brand_id", sa.Integer(), sa.ForeignKey("brands.id"), nullable=True),
        sa.Column("data_inicio", sa.DateTime(), nullable=False),
        sa.Column("data_fim", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_campaigns_nome", "campaigns", ["nome"])

    op.create_table(
        "product_colors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=func.now()),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(), nullable=False),
        sa.Column("descricao", sa.String(), nullable=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("brand_id", sa.Integer(), sa.ForeignKey("brands.id"), nullable=True),
        sa.Column("preco", sa.Float(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("thumbnails", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "product_color_sizes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("product_color_id", sa.Integer(), sa.ForeignKey("product_colors.id"), nullable=True),
        sa.Column("size", sa.String(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
    )
    op.create_index("ix_product_color_sizes_product_id", "product_color_sizes", ["product_id"])

    op.create_table(
        "product_color_images",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("product_color_id", sa.Integer(), sa.ForeignKey("product_colors.id"), nullable=False),
        sa.Column("image_path", sa.String(), nullable=False),
        sa.Column("thumbnail_path", sa.String(), nullable=True),
    )
    op.create_index("ix_product_color_images_product_id", "product_color_images", ["product_id"])

    op.create_table(
        "carts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=func.now()),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cart_id", sa.Integer(), sa.ForeignKey("carts.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("product_size_id", sa.Integer(), sa.ForeignKey("product_color_sizes.id"), nullable=False),
        sa.Column("quantidade", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("cor", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_cart_items_cart_id", "cart_items", ["cart_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("id_cliente", sa.Integer(), nullable=False),
        sa.Column("telefone", sa.String(length=20), nullable=False),
        sa.Column("observacoes", sa.String(), nullable=True),
        sa.Column("notificacoes_enviadas", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_orders_id_cliente", "orders", ["id_cliente"])

    op.create_table(
        "order_product",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("product_size_id", sa.Integer(), nullable=False),
        sa.Column("quantidade", sa.Integer(), nullable=False),
        sa.Column("cor", sa.String(length=255), nullable=True),
        sa.Column("status_pagamento", sa.String(), nullable=False, server_default="pendente"),
        sa.Column("status_estoque", sa.String(), nullable=False, server_default="pendente"),
        sa.Column("is_processed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("processed_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_order_product_order_id", "order_product", ["order_id"])
    op.create_index("ix_order_product_product_id", "order_product", ["product_id"])


def downgrade():
    op.drop_table("order_product")
    op.drop_table("orders")
    op.drop_table("cart_items")
    op.drop_table("carts")
    op.drop_table("product_color_images")
    op.drop_table("product_color_sizes")
    op.drop_table("products")
    op.drop_table("product_colors")
    op.drop_table("campaigns")
    op.drop_table("brands")
    op.drop_table("users")
