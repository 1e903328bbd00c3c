
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

STATUSES = ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED')

def upgrade():
    op.create_table(
        'tables',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('number', sa.String(length=16), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('number', name='uq_tables_number'),
    )

    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_name', sa.String(length=120), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=32), nullable=True),
        sa.Column('reservation_date', sa.Date(), nullable=False),
        sa.Column('reservation_time', sa.Time(), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum(*STATUSES, name='reservation_status'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_reservations_customer_email', 'reservations', ['customer_email'])
    op.create_index('ix_reservations_reservation_date', 'reservations', ['reservation_date'])

    op.create_table(
        'reservation_tables',
        sa.Column('reservation_id', sa.Integer(), sa.ForeignKey('reservations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('table_id', sa.Integer(), sa.ForeignKey('tables.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_reservation_tables_table_id', 'reservation_tables', ['table_id'])

def downgrade():
    op.drop_index('ix_reservation_tables_table_id', table_name='reservation_tables')
    op.drop_table('reservation_tables')
    op.drop_index('ix_reservations_reservation_date', table_name='reservations')
    op.drop_index('ix_reservations_customer_email', table_name='reservations')
    op.drop_table('reservations')
    sa.Enum(name='reservation_status').drop(op.get_bind(), checkfirst=True)
    op.drop_table('tables')
