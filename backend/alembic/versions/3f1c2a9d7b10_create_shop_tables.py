"""Create users, catalog, cart and order tables

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2026-10-19 10:12:41.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
    )
    op.create_index('ix_users_user_id', 'users', ['user_id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), primary_key=True),
        sa.Column('first_name', sa.String(length=50), nullable=True),
        sa.Column('last_name', sa.String(length=50), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('address', sa.String(length=200), nullable=True),
        sa.Column('city', sa.String(length=50), nullable=True),
        sa.Column('state', sa.String(length=2), nullable=True),
        sa.Column('zip', sa.String(length=20), nullable=True),
    )

    op.create_table(
        'categories',
        sa.Column('category_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
    )
    op.create_index('ix_categories_category_id', 'categories', ['category_id'])

    op.create_table(
        'products',
        sa.Column('product_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.category_id'), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('color', sa.String(length=20), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('image_url', sa.String(length=200), nullable=True),
        sa.CheckConstraint('price >= 0'),
        sa.CheckConstraint('stock >= 0'),
    )
    op.create_index('ix_products_product_id', 'products', ['product_id'])
    op.create_index('ix_products_name', 'products', ['name'])

    # Composite key: a product appears at most once per cart
    op.create_table(
        'shopping_cart',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.product_id'), primary_key=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 1'),
    )

    op.create_table(
        'orders',
        sa.Column('order_id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('address', sa.String(length=200), nullable=True),
        sa.Column('city', sa.String(length=50), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('zip', sa.String(length=20), nullable=True),
        sa.Column('shipping_amount', sa.Numeric(10, 2), nullable=False),
    )
    op.create_index('ix_orders_order_id', 'orders', ['order_id'])
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])

    op.create_table(
        'order_line_items',
        sa.Column('order_line_id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.order_id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.product_id'), nullable=False),
        sa.Column('sales_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('discount', sa.Numeric(5, 4), nullable=False),
    )
    op.create_index('ix_order_line_items_order_line_id', 'order_line_items', ['order_line_id'])
    op.create_index('ix_order_line_items_order_id', 'order_line_items', ['order_id'])

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=True),
        sa.Column('action', sa.String(length=50)),
        sa.Column('resource', sa.String(length=50)),
        sa.Column('status', sa.String(length=20)),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    for column in ('id', 'ts', 'action', 'resource', 'status'):
        op.create_index(f'ix_logs_{column}', 'logs', [column])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('logs')
    op.drop_table('order_line_items')
    op.drop_table('orders')
    op.drop_table('shopping_cart')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('profiles')
    op.drop_table('users')
