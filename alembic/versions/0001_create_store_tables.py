"""create_store_tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - Add catalog, cart and order tables."""

    # Create categories table
    op.create_table(
        'categories',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name_en', sa.String(255), nullable=False),
        sa.Column('name_id', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description_en', sa.Text(), nullable=True),
        sa.Column('description_id', sa.Text(), nullable=True),
        sa.Column('image', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )
    op.create_index('ix_categories_is_active', 'categories', ['is_active'])

    # Create products table
    op.create_table(
        'products',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('category_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name_en', sa.String(255), nullable=False),
        sa.Column('name_id', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description_en', sa.Text(), nullable=True),
        sa.Column('description_id', sa.Text(), nullable=True),
        sa.Column('short_description_en', sa.Text(), nullable=True),
        sa.Column('short_description_id', sa.Text(), nullable=True),
        sa.Column('base_price', sa.Numeric(15, 2), nullable=False),
        sa.Column('sku', sa.String(255), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('weight', sa.Numeric(8, 2), nullable=True),
        sa.Column('images', JSONB(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('is_featured', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
        sa.UniqueConstraint('sku')
    )
    op.create_index('ix_products_category_id', 'products', ['category_id'])
    op.create_index('ix_products_active_featured', 'products', ['is_active', 'is_featured'])

    # Create product_variants table
    op.create_table(
        'product_variants',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('size', sa.String(50), nullable=True),
        sa.Column('color', sa.String(50), nullable=True),
        sa.Column('sku', sa.String(255), nullable=False),
        sa.Column('price_adjustment', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('stock_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('image', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku')
    )
    op.create_index('ix_product_variants_product_id', 'product_variants', ['product_id'])
    op.create_index(
        'ix_product_variants_product_size_color',
        'product_variants',
        ['product_id', 'size', 'color'],
    )

    # Create carts table
    op.create_table(
        'carts',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=True),
        sa.Column('session_id', sa.String(255), nullable=True),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_variant_id', UUID(as_uuid=True), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(15, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            '(user_id IS NOT NULL AND session_id IS NULL) '
            'OR (user_id IS NULL AND session_id IS NOT NULL)',
            name='cart_exactly_one_owner',
        ),
        sa.CheckConstraint('quantity > 0', name='cart_positive_quantity'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['product_variant_id'], ['product_variants.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_carts_user_id', 'carts', ['user_id'])
    op.create_index('ix_carts_session_id', 'carts', ['session_id'])
    op.create_index('ix_carts_product_id', 'carts', ['product_id'])
    op.create_index(
        'ix_carts_user_product_variant',
        'carts',
        ['user_id', 'product_id', 'product_variant_id'],
    )

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_number', sa.String(32), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('subtotal', sa.Numeric(15, 2), nullable=False),
        sa.Column('tax_amount', sa.Numeric(15, 2), server_default='0', nullable=False),
        sa.Column('shipping_cost', sa.Numeric(15, 2), server_default='0', nullable=False),
        sa.Column('total', sa.Numeric(15, 2), nullable=False),
        sa.Column('currency', sa.String(3), server_default='IDR', nullable=False),
        sa.Column('billing_address', JSONB(), nullable=False),
        sa.Column('shipping_address', JSONB(), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('payment_status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('shipping_method', sa.String(20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('locale', sa.String(5), server_default='en', nullable=False),
        sa.Column('shipped_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'], unique=True)
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_payment_status', 'orders', ['payment_status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    # Create order_items table
    op.create_table(
        'order_items',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('product_variant_id', UUID(as_uuid=True), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(15, 2), nullable=False),
        sa.Column('total', sa.Numeric(15, 2), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False),
        sa.Column('product_sku', sa.String(255), nullable=False),
        sa.Column('product_details', JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(
            ['product_variant_id'], ['product_variants.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])
    op.create_index(
        'ix_order_items_order_product', 'order_items', ['order_id', 'product_id']
    )


def downgrade() -> None:
    """Downgrade schema - Drop store tables."""
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('carts')
    op.drop_table('product_variants')
    op.drop_table('products')
    op.drop_table('categories')
