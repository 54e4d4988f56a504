"""Create events table and hourly/daily rollups

Revision ID: 3c1f0e9a7b42
Revises:
Create Date: 2026-10-17 09:12:04.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c1f0e9a7b42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ROLLUPS = {
    # view name -> bucket width
    'events_hourly': '1 hour',
    'events_daily': '1 day',
}


def _timescale_available() -> bool:
    bind = op.get_bind()
    return bind.execute(
        sa.text("SELECT 1 FROM pg_available_extensions WHERE name = 'timescaledb'")
    ).scalar() is not None


def upgrade():
    op.create_table(
        'events',
        sa.Column('id', sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column('event_name', sa.String(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('payload', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # Hypertables need the partitioning column in every unique constraint
        sa.PrimaryKeyConstraint('id', 'timestamp'),
    )
    op.create_index('idx_events_name_timestamp', 'events', ['event_name', 'timestamp'])
    op.create_index('idx_events_timestamp', 'events', ['timestamp'])

    if _timescale_available():
        op.execute("CREATE EXTENSION IF NOT EXISTS timescaledb")
        op.execute("SELECT create_hypertable('events', 'timestamp', if_not_exists => TRUE)")

        for view, width in ROLLUPS.items():
            op.execute(f"""
                CREATE MATERIALIZED VIEW {view}
                WITH (timescaledb.continuous, timescaledb.materialized_only = false) AS
                SELECT
                    time_bucket(INTERVAL '{width}', timestamp) AS bucket,
                    event_name,
                    COUNT(*) AS event_count,
                    COUNT(DISTINCT payload->>'user_id') AS unique_users
                FROM events
                GROUP BY bucket, event_name
                WITH NO DATA
            """)
            op.execute(f"""
                SELECT add_continuous_aggregate_policy('{view}',
                    start_offset => INTERVAL '{width}' * 3,
                    end_offset => NULL,
                    schedule_interval => INTERVAL '{width}' / 4)
            """)
    else:
        # Plain Postgres: compute the same shape on read
        for view, width in ROLLUPS.items():
            op.execute(f"""
                CREATE VIEW {view} AS
                SELECT
                    date_trunc('{width.split()[1]}', timestamp) AS bucket,
                    event_name,
                    COUNT(*) AS event_count,
                    COUNT(DISTINCT payload->>'user_id') AS unique_users
                FROM events
                GROUP BY 1, 2
            """)


def downgrade():
    timescale = op.get_bind().execute(
        sa.text("SELECT 1 FROM pg_extension WHERE extname = 'timescaledb'")
    ).scalar() is not None
    kind = "MATERIALIZED VIEW" if timescale else "VIEW"

    for view in ROLLUPS:
        op.execute(f"DROP {kind} IF EXISTS {view}")
    op.drop_index('idx_events_timestamp', 'events')
    op.drop_index('idx_events_name_timestamp', 'events')
    op.drop_table('events')
