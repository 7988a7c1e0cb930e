"""create store, catalog, cart and shipping tables

Revision ID: 0a1c5e7d9b21
Revises:
Create Date: 2026-09-14 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0a1c5e7d9b21'
down_revision = None
branch_labels = None
depends_on = None


RATE_TYPES = ('free', 'flat_rate', 'weight_based', 'price_based')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'stores',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default=sa.text("'COP'")),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_stores'),
        sa.UniqueConstraint('slug', name='uq_stores_slug'),
    )
    op.create_index('ix_stores_owner_id', 'stores', ['owner_id'])

    op.create_table(
        'products',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('store_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('sku', sa.String(length=64), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('weight', sa.Numeric(8, 2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], name='fk_products_store_id_stores', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_products'),
        sa.UniqueConstraint('store_id', 'slug', name='uq_products_store_slug'),
    )
    op.create_index('ix_products_store_id', 'products', ['store_id'])

    op.create_table(
        'carts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('store_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('session_id', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], name='fk_carts_store_id_stores', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_carts'),
    )
    op.create_index('ix_carts_store_id', 'carts', ['store_id'])
    op.create_index('ix_carts_user_id', 'carts', ['user_id'])
    op.create_index('ix_carts_session_id', 'carts', ['session_id'])

    op.create_table(
        'cart_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('cart_id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_items_quantity_positive'),
        sa.ForeignKeyConstraint(['cart_id'], ['carts.id'], name='fk_cart_items_cart_id_carts', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name='fk_cart_items_product_id_products', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_cart_items'),
    )
    op.create_index('ix_cart_items_cart_id', 'cart_items', ['cart_id'])

    op.create_table(
        'shipping_zones',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('store_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('countries', sa.JSON(), nullable=True),
        sa.Column('states', sa.JSON(), nullable=True),
        sa.Column('postal_codes', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], name='fk_shipping_zones_store_id_stores', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_shipping_zones'),
    )
    op.create_index('ix_shipping_zones_store_id', 'shipping_zones', ['store_id'])

    types_sql = ", ".join(f"'{t}'" for t in RATE_TYPES)
    op.create_table(
        'shipping_rates',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('zone_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=24), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('min_weight', sa.Numeric(8, 2), nullable=True),
        sa.Column('max_weight', sa.Numeric(8, 2), nullable=True),
        sa.Column('min_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('max_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('estimated_days', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.CheckConstraint(f"type IN ({types_sql})", name='ck_shipping_rates_rate_type'),
        sa.ForeignKeyConstraint(['zone_id'], ['shipping_zones.id'], name='fk_shipping_rates_zone_id_shipping_zones', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_shipping_rates'),
    )
    op.create_index('ix_shipping_rates_zone_id', 'shipping_rates', ['zone_id'])

    op.create_table(
        'shipping_methods',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('store_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('carrier', sa.String(length=120), nullable=True),
        sa.Column('code', sa.String(length=64), nullable=True),
        sa.Column('tracking_url_template', sa.String(length=512), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], name='fk_shipping_methods_store_id_stores', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_shipping_methods'),
    )
    op.create_index('ix_shipping_methods_store_id', 'shipping_methods', ['store_id'])


def downgrade() -> None:
    for table, indexes in (
        ('shipping_methods', ['ix_shipping_methods_store_id']),
        ('shipping_rates', ['ix_shipping_rates_zone_id']),
        ('shipping_zones', ['ix_shipping_zones_store_id']),
        ('cart_items', ['ix_cart_items_cart_id']),
        ('carts', ['ix_carts_session_id', 'ix_carts_user_id', 'ix_carts_store_id']),
        ('products', ['ix_products_store_id']),
        ('stores', ['ix_stores_owner_id']),
    ):
        for ix in indexes:
            op.drop_index(ix, table_name=table)
        op.drop_table(table)
