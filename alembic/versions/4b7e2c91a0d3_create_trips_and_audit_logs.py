"""create_trips_and_audit_logs

Revision ID: 4b7e2c91a0d3
Revises: 
Create Date: 2026-10-12 09:14:37.218044

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e2c91a0d3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # gen_random_uuid() for audit ids
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    # Create trips table
    op.execute("""
        CREATE TABLE trips (
            id UUID PRIMARY KEY,
            owner_id VARCHAR(255),
            title VARCHAR(255) NOT NULL,
            location VARCHAR(255) NOT NULL,
            plan_payload JSONB NOT NULL DEFAULT '{}'::jsonb,
            last_updated TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            deleted_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("CREATE INDEX idx_trips_owner_id ON trips (owner_id)")
    op.execute("CREATE INDEX idx_trips_last_updated ON trips (last_updated)")
    op.execute("CREATE INDEX idx_trips_title ON trips (title)")
    op.execute("CREATE INDEX idx_trips_location ON trips (location)")
    op.execute("CREATE INDEX idx_trips_deleted_at ON trips (deleted_at)")

    # Create append-only audit_logs table
    op.execute("""
        CREATE TABLE audit_logs (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            entity_type VARCHAR(50) NOT NULL,
            entity_id VARCHAR(255) NOT NULL,
            action VARCHAR(20) NOT NULL,
            actor_id VARCHAR(255),
            before JSONB,
            after JSONB,
            source_ip VARCHAR(64),
            source_agent TEXT,
            timestamp TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT chk_audit_logs_action
                CHECK (action IN ('create', 'update', 'soft_delete', 'hard_delete'))
        )
    """)

    op.execute("CREATE INDEX idx_audit_logs_entity ON audit_logs (entity_type, entity_id)")
    op.execute("CREATE INDEX idx_audit_logs_actor_id ON audit_logs (actor_id)")
    op.execute("CREATE INDEX idx_audit_logs_timestamp ON audit_logs (timestamp)")


def downgrade() -> None:
    """Downgrade schema."""
    # Drop audit_logs
    op.execute("DROP INDEX IF EXISTS idx_audit_logs_timestamp")
    op.execute("DROP INDEX IF EXISTS idx_audit_logs_actor_id")
    op.execute("DROP INDEX IF EXISTS idx_audit_logs_entity")
    op.execute("DROP TABLE IF EXISTS audit_logs")

    # Drop trips
    op.execute("DROP INDEX IF EXISTS idx_trips_deleted_at")
    op.execute("DROP INDEX IF EXISTS idx_trips_location")
    op.execute("DROP INDEX IF EXISTS idx_trips_title")
    op.execute("DROP INDEX IF EXISTS idx_trips_last_updated")
    op.execute("DROP INDEX IF EXISTS idx_trips_owner_id")
    op.execute("DROP TABLE IF EXISTS trips")
