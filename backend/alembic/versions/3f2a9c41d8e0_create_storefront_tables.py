"""Create storefront cart and checkout tables

Revision ID: 3f2a9c41d8e0
Revises:
Create Date: 2026-10-17 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '3f2a9c41d8e0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUSES = ('pending', 'confirm', 'processing', 'pickup', 'on the way', 'delivered', 'cancelled')
PAYMENT_STATUSES = ('paid', 'unpaid')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Shipping geography
    op.create_table(
        'countries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
    )
    op.create_index('ix_countries_id', 'countries', ['id'])
    op.create_table(
        'provinces',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('country_id', sa.Integer(), sa.ForeignKey('countries.id'), nullable=False),
    )
    op.create_index('ix_provinces_id', 'provinces', ['id'])
    op.create_index('ix_provinces_country_id', 'provinces', ['country_id'])
    op.create_table(
        'cities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('province_id', sa.Integer(), sa.ForeignKey('provinces.id'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_cities_id', 'cities', ['id'])
    op.create_index('ix_cities_province_id', 'cities', ['province_id'])

    # Catalogue
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('price', sa.Integer(), sa.CheckConstraint('price >= 0'), nullable=False),
        sa.Column('stock', sa.Integer(), sa.CheckConstraint('stock >= 0'), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_table(
        'product_sizes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('surcharge', sa.Integer(), sa.CheckConstraint('surcharge >= 0'), nullable=False),
    )
    op.create_index('ix_product_sizes_id', 'product_sizes', ['id'])
    op.create_index('ix_product_sizes_product_id', 'product_sizes', ['product_id'])
    op.create_table(
        'product_designs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('surcharge', sa.Integer(), sa.CheckConstraint('surcharge >= 0'), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
    )
    op.create_index('ix_product_designs_id', 'product_designs', ['id'])
    op.create_index('ix_product_designs_product_id', 'product_designs', ['product_id'])

    # Carts
    op.create_table(
        'carts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_carts_id', 'carts', ['id'])
    op.create_index('ix_carts_customer_id', 'carts', ['customer_id'], unique=True)
    op.create_table(
        'cart_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('cart_id', sa.Integer(), sa.ForeignKey('carts.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity >= 1 AND quantity <= 100'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('unit_price', sa.Integer(), nullable=False),
        sa.Column('size_id', sa.Integer(), nullable=True),
        sa.Column('size_label', sa.String(), nullable=True),
        sa.Column('size_surcharge', sa.Integer(), nullable=True),
        sa.Column('design_id', sa.Integer(), nullable=True),
        sa.Column('design_title', sa.String(), nullable=True),
        sa.Column('design_surcharge', sa.Integer(), nullable=True),
        sa.Column('design_image_url', sa.String(), nullable=True),
        sa.UniqueConstraint('cart_id', 'product_id', name='uq_cartitem_cart_product'),
    )
    op.create_index('ix_cart_items_id', 'cart_items', ['id'])
    op.create_index('ix_cart_items_cart_id', 'cart_items', ['cart_id'])
    op.create_index('ix_cart_items_product_id', 'cart_items', ['product_id'])

    # Orders
    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('cart_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum(*ORDER_STATUSES, name='orderstatus', native_enum=False), nullable=False),
        sa.Column('payment_status', sa.Enum(*PAYMENT_STATUSES, name='paymentstatus', native_enum=False), nullable=False),
        sa.Column('payment_method', sa.String(), nullable=True),
        sa.Column('subtotal', sa.Integer(), nullable=False),
        sa.Column('shipping', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('items_count', sa.Integer(), nullable=False),
        sa.Column('shipping_full_name', sa.String(), nullable=False),
        sa.Column('shipping_email', sa.String(), nullable=False),
        sa.Column('shipping_phone', sa.String(), nullable=False),
        sa.Column('shipping_address', sa.String(), nullable=False),
        sa.Column('shipping_country_id', sa.Integer(), sa.ForeignKey('countries.id'), nullable=False),
        sa.Column('shipping_province_id', sa.Integer(), sa.ForeignKey('provinces.id'), nullable=False),
        sa.Column('shipping_city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('shipping_postal_code', sa.String(), nullable=True),
        sa.Column('shipping_location_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_cart_id', 'orders', ['cart_id'])
    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('unit_price', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('size_id', sa.Integer(), nullable=True),
        sa.Column('size_label', sa.String(), nullable=True),
        sa.Column('size_surcharge', sa.Integer(), nullable=True),
        sa.Column('design_id', sa.Integer(), nullable=True),
        sa.Column('design_title', sa.String(), nullable=True),
        sa.Column('design_surcharge', sa.Integer(), nullable=True),
        sa.Column('design_image_url', sa.String(), nullable=True),
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    # Audit log
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('action', sa.String(50)),
        sa.Column('resource', sa.String(50)),
        sa.Column('resource_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20)),
        sa.Column('ip', sa.String(64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    op.create_index('ix_logs_id', 'logs', ['id'])
    op.create_index('ix_logs_ts', 'logs', ['ts'])
    op.create_index('ix_logs_action', 'logs', ['action'])
    op.create_index('ix_logs_resource', 'logs', ['resource'])
    op.create_index('ix_logs_resource_id', 'logs', ['resource_id'])
    op.create_index('ix_logs_status', 'logs', ['status'])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'logs', 'order_items', 'orders', 'cart_items', 'carts',
        'product_designs', 'product_sizes', 'products',
        'cities', 'provinces', 'countries', 'users',
    ):
        op.drop_table(table)
