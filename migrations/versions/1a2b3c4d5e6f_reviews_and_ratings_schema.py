"""reviews and ratings schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2025-06-01 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

from shopease.models.triggers import drop_statements_for, statements_for

# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('avg_rating', sa.Numeric(3, 2), nullable=False, server_default='0'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )
    op.create_index('idx_product_name', 'products', ['name'])

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False, unique=True),
    )

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=False),
        sa.Column('review_date', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'ratings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_ratings_rating_range'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
    )

    # UpdateAvgRating / AddReview procedures and the rating triggers
    for statement in statements_for(op.get_bind().dialect.name):
        op.execute(statement)


def downgrade():
    op.drop_table('ratings')
    for statement in drop_statements_for(op.get_bind().dialect.name):
        op.execute(statement)
    op.drop_table('reviews')
    op.drop_table('customers')
    op.drop_index('idx_product_name', table_name='products')
    op.drop_table('products')
