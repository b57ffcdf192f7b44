"""Create products, gate pass and error log tables

Revision ID: 3c9e1f2a7b40
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9e1f2a7b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_code', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('transport', sa.String(length=32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('from_location', sa.String(length=128), nullable=False),
        sa.Column('to_location', sa.String(length=128), nullable=True),
        sa.Column('product_type', sa.String(length=64), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('products', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_products_product_code'), ['product_code'], unique=True)
        batch_op.create_index(batch_op.f('ix_products_name'), ['name'], unique=False)

    op.create_table(
        'gate_passes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gate_pass_number', sa.String(length=64), nullable=False),
        sa.Column('date', sa.String(length=16), nullable=False),
        sa.Column('destination', sa.String(length=256), nullable=False),
        sa.Column('prepared_by', sa.String(length=128), nullable=False),
        sa.Column('checked_by', sa.String(length=128), nullable=True),
        sa.Column('authorized_by', sa.String(length=128), nullable=True),
        sa.Column('generated_at', sa.DateTime(), nullable=True),
        sa.Column('submit_token', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('gate_passes', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_gate_passes_gate_pass_number'), ['gate_pass_number'], unique=True)
        batch_op.create_index(batch_op.f('ix_gate_passes_generated_at'), ['generated_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_gate_passes_submit_token'), ['submit_token'], unique=True)

    op.create_table(
        'gate_pass_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gate_pass_id', sa.Integer(), nullable=False),
        sa.Column('line_number', sa.Integer(), nullable=False),
        sa.Column('product_code', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('transport', sa.String(length=32), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('selected_quantity', sa.Integer(), nullable=False),
        sa.Column('product_type', sa.String(length=64), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['gate_pass_id'], ['gate_passes.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('gate_pass_items', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_gate_pass_items_product_code'), ['product_code'], unique=False)

    op.create_table(
        'stock_movements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('movement_type', sa.String(length=32), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('reference', sa.String(length=128), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('stock_movements', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_stock_movements_timestamp'), ['timestamp'], unique=False)

    op.create_table(
        'error_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('error_type', sa.String(length=128), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=False),
        sa.Column('traceback', sa.Text(), nullable=True),
        sa.Column('status_code', sa.Integer(), nullable=True),
        sa.Column('request_method', sa.String(length=10), nullable=True),
        sa.Column('request_url', sa.String(length=512), nullable=True),
        sa.Column('endpoint', sa.String(length=128), nullable=True),
        sa.Column('form_data', sa.Text(), nullable=True),
        sa.Column('resource_type', sa.String(length=16), nullable=True),
        sa.Column('resource_key', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('error_logs', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_error_logs_error_type'), ['error_type'], unique=False)
        batch_op.create_index(batch_op.f('ix_error_logs_resource_key'), ['resource_key'], unique=False)


def downgrade():
    with op.batch_alter_table('error_logs', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_error_logs_resource_key'))
        batch_op.drop_index(batch_op.f('ix_error_logs_error_type'))
    op.drop_table('error_logs')

    with op.batch_alter_table('stock_movements', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_stock_movements_timestamp'))
    op.drop_table('stock_movements')

    with op.batch_alter_table('gate_pass_items', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_gate_pass_items_product_code'))
    op.drop_table('gate_pass_items')

    with op.batch_alter_table('gate_passes', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_gate_passes_submit_token'))
        batch_op.drop_index(batch_op.f('ix_gate_passes_generated_at'))
        batch_op.drop_index(batch_op.f('ix_gate_passes_gate_pass_number'))
    op.drop_table('gate_passes')

    with op.batch_alter_table('products', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_products_name'))
        batch_op.drop_index(batch_op.f('ix_products_product_code'))
    op.drop_table('products')
