"""005: create order_reservations

Revision ID: 005
Revises: 004
Create Date: 2026-10-17

A reservation references exactly one order (sell XOR buy). Deleting the
order deletes its reservations.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE order_reservations (
            id                      BIGSERIAL       PRIMARY KEY,
            sell_order_id           BIGINT          REFERENCES sell_orders (id) ON DELETE CASCADE,
            buy_order_id            BIGINT          REFERENCES buy_orders (id) ON DELETE CASCADE,
            counterparty_user_id    BIGINT          NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            quantity                INT             NOT NULL,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'pending',
            notes                   TEXT,
            expires_at              TIMESTAMPTZ,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_order_reservations_one_order CHECK (
                (sell_order_id IS NOT NULL) <> (buy_order_id IS NOT NULL)
            ),
            CONSTRAINT ck_order_reservations_quantity CHECK (quantity > 0),
            CONSTRAINT ck_order_reservations_status CHECK (
                status IN ('pending', 'confirmed', 'rejected', 'fulfilled', 'expired', 'cancelled')
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_order_reservations_updated_at
            BEFORE UPDATE ON order_reservations
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # Partial indexes: the market board only aggregates active reservations
    op.execute("""
        CREATE INDEX idx_order_reservations_sell_active ON order_reservations (sell_order_id)
        WHERE sell_order_id IS NOT NULL AND status IN ('pending', 'confirmed');
    """)
    op.execute("""
        CREATE INDEX idx_order_reservations_buy_active ON order_reservations (buy_order_id)
        WHERE buy_order_id IS NOT NULL AND status IN ('pending', 'confirmed');
    """)
    op.execute(
        "CREATE INDEX idx_order_reservations_counterparty ON order_reservations (counterparty_user_id);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_reservations CASCADE;")
