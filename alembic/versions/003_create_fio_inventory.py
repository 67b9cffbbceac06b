"""003: create fio_user_storage and fio_inventory

Revision ID: 003
Revises: 002
Create Date: 2026-10-17

Written by the FIO sync job, read by the market board.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE fio_user_storage (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             BIGINT          NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            storage_id          VARCHAR(64)     NOT NULL,
            location_id         VARCHAR(20),
            type                VARCHAR(30)     NOT NULL,
            fio_uploaded_at     TIMESTAMPTZ,
            last_synced_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_fio_user_storage UNIQUE (user_id, storage_id)
        );
    """)
    op.execute("""
        CREATE TABLE fio_inventory (
            id                  BIGSERIAL       PRIMARY KEY,
            user_storage_id     BIGINT          NOT NULL
                                REFERENCES fio_user_storage (id) ON DELETE CASCADE,
            commodity_ticker    VARCHAR(10)     NOT NULL,
            quantity            INT             NOT NULL,
            CONSTRAINT uq_fio_inventory UNIQUE (user_storage_id, commodity_ticker),
            CONSTRAINT ck_fio_inventory_quantity CHECK (quantity >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_fio_user_storage_user ON fio_user_storage (user_id, location_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS fio_inventory CASCADE;")
    op.execute("DROP TABLE IF EXISTS fio_user_storage CASCADE;")
