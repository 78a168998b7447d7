"""init_checkout_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- offers: General admission inventory per ticket tier (quantity_sold is the ledger)
- event_seats: Reserved seating, one row per (event, seat) with lock expiry
- orders / order_items: Checkout aggregate with line snapshots
- payments: One payment per order, keyed by the gateway intent id
- tickets: Issued tickets with unique redemption codes
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text('now()'),
        nullable=False,
    )


def upgrade() -> None:
    """Create all checkout tables."""

    # ========== Inventory ==========

    op.create_table(
        'offers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('ticket_tier_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity_for_sale', sa.Integer(), nullable=False),
        sa.Column('quantity_sold', sa.Integer(), server_default='0', nullable=False),
        sa.CheckConstraint(
            'quantity_sold >= 0 AND quantity_sold <= quantity_for_sale',
            name='ck_offers_quantity_sold_bounds',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_offers_event_id'), 'offers', ['event_id'])

    op.create_table(
        'event_seats',
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('ticket_tier_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='available', nullable=False),
        sa.Column('lock_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('order_id', sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint('event_id', 'seat_id'),
    )
    op.create_index(op.f('ix_event_seats_order_id'), 'event_seats', ['order_id'])
    # reaper scan: status = 'locked' AND lock_expires_at < now
    op.create_index(
        'ix_event_seats_status_lock_expires_at', 'event_seats', ['status', 'lock_expires_at']
    )

    # ========== Orders ==========

    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('service_fee', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_orders_user_id'), 'orders', ['user_id'])
    op.create_index(op.f('ix_orders_status'), 'orders', ['status'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('offer_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('ticket_tier_id', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_order_items_order_id'), 'order_items', ['order_id'])

    # ========== Payments & tickets ==========

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('amount_charged', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('external_reference', sa.String(length=255), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id'),
        sa.UniqueConstraint('external_reference'),
    )

    op.create_table(
        'tickets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('ticket_tier_id', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=True),
        sa.Column('price_paid', sa.Numeric(12, 2), nullable=False),
        sa.Column('redemption_code', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='valid', nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('redemption_code'),
    )
    op.create_index(op.f('ix_tickets_order_id'), 'tickets', ['order_id'])
    op.create_index(op.f('ix_tickets_user_id'), 'tickets', ['user_id'])


def downgrade() -> None:
    op.drop_table('tickets')
    op.drop_table('payments')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('event_seats')
    op.drop_table('offers')
