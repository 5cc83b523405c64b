"""Initial schema: orderable catalog, tours with offers, bookings

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

ORDERED_TABLES = ('reviews', 'blogs', 'countries', 'team_members', 'visas', 'tour_categories', 'tours')


def upgrade():
    op.create_table('reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('designation', sa.String(length=120), nullable=True),
        sa.Column('text', sa.String(length=2000), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('blogs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=150), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('tags', sa.String(length=500), nullable=False, comment='Comma separated, at most 10'),
        sa.Column('read_time', sa.String(length=32), nullable=False, comment="e.g. '5 min'"),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('countries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=80), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('team_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('designation', sa.String(length=120), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('visas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('country_name', sa.String(length=80), nullable=False),
        sa.Column('visa_type', sa.String(length=80), nullable=False),
        sa.Column('fee', sa.Numeric(precision=12, scale=2), nullable=False, comment='Application fee charged at checkout'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('tour_categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('tours',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('destination_id', sa.Integer(), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, comment='DRAFT | PUBLISHED'),
        sa.Column('base_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('booking_fee_percentage', sa.Numeric(precision=5, scale=2), nullable=True, comment='Deposit taken against base_price; null uses platform default'),
        sa.Column('offer_is_active', sa.Boolean(), nullable=False),
        sa.Column('offer_discount_type', sa.String(length=16), nullable=True, comment='flat | percentage'),
        sa.Column('offer_flat_discount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('offer_discount_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['tour_categories.id'], ),
        sa.ForeignKeyConstraint(['destination_id'], ['countries.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    for table in ORDERED_TABLES:
        op.create_index(op.f(f'ix_{table}_order'), table, ['order'], unique=False)

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tour_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('tour_title', sa.String(length=200), nullable=False, comment='Snapshot at booking time'),
        sa.Column('destination', sa.String(length=80), nullable=True),
        sa.Column('travel_date', sa.Date(), nullable=True),
        sa.Column('persons', sa.Integer(), nullable=False),
        sa.Column('booking_fee', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('transaction_id', sa.String(length=64), nullable=False),
        sa.Column('payment_status', sa.String(length=16), nullable=False, comment='pending | paid | failed'),
        sa.Column('booking_status', sa.String(length=16), nullable=False, comment='pending | confirmed | cancelled | completed'),
        sa.Column('validation_id', sa.String(length=128), nullable=True),
        sa.Column('message', sa.String(length=2000), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('settled_at', sa.DateTime(), nullable=True, comment='When payment left the pending state'),
        sa.ForeignKeyConstraint(['tour_id'], ['tours.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_id')
    )
    op.create_index('ix_booking_payment_status', 'bookings', ['payment_status'], unique=False)

    op.create_table('visa_bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('visa_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('country', sa.String(length=80), nullable=False, comment='Snapshot at application time'),
        sa.Column('visa_type', sa.String(length=80), nullable=False),
        sa.Column('application_fee', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('transaction_id', sa.String(length=64), nullable=False),
        sa.Column('payment_status', sa.String(length=16), nullable=False, comment='pending | paid | failed'),
        sa.Column('status', sa.String(length=16), nullable=False, comment='pending | submitted | approved | rejected | cancelled'),
        sa.Column('validation_id', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('settled_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['visa_id'], ['visas.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_id')
    )


def downgrade():
    op.drop_table('visa_bookings')
    op.drop_index('ix_booking_payment_status', table_name='bookings')
    op.drop_table('bookings')
    for table in ORDERED_TABLES:
        op.drop_index(op.f(f'ix_{table}_order'), table_name=table)
    op.drop_table('tours')
    op.drop_table('tour_categories')
    op.drop_table('visas')
    op.drop_table('team_members')
    op.drop_table('countries')
    op.drop_table('blogs')
    op.drop_table('reviews')
