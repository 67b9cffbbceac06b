"""004: create sell_orders and buy_orders

Revision ID: 004
Revises: 003
Create Date: 2026-10-17

Both tables are unique on (user, commodity, location, visibility, currency);
posting the same key replaces the row.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE sell_orders (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             BIGINT          NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            commodity_ticker    VARCHAR(10)     NOT NULL,
            location_id         VARCHAR(20)     NOT NULL,
            price               NUMERIC(14, 2)  NOT NULL,
            currency            VARCHAR(3)      NOT NULL,
            visibility          VARCHAR(10)     NOT NULL DEFAULT 'internal',
            limit_mode          VARCHAR(10)     NOT NULL DEFAULT 'none',
            limit_quantity      INT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_sell_orders_key UNIQUE
                (user_id, commodity_ticker, location_id, visibility, currency),
            CONSTRAINT ck_sell_orders_price      CHECK (price >= 0),
            CONSTRAINT ck_sell_orders_currency   CHECK (currency IN ('ICA', 'CIS', 'AIC', 'NCC')),
            CONSTRAINT ck_sell_orders_visibility CHECK (visibility IN ('internal', 'partner')),
            CONSTRAINT ck_sell_orders_limit_mode CHECK (limit_mode IN ('none', 'max_sell', 'reserve')),
            CONSTRAINT ck_sell_orders_limit_qty  CHECK (limit_quantity IS NULL OR limit_quantity >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_sell_orders_updated_at
            BEFORE UPDATE ON sell_orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE buy_orders (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             BIGINT          NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            commodity_ticker    VARCHAR(10)     NOT NULL,
            location_id         VARCHAR(20)     NOT NULL,
            quantity            INT             NOT NULL,
            price               NUMERIC(14, 2)  NOT NULL,
            currency            VARCHAR(3)      NOT NULL,
            visibility          VARCHAR(10)     NOT NULL DEFAULT 'internal',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_buy_orders_key UNIQUE
                (user_id, commodity_ticker, location_id, visibility, currency),
            CONSTRAINT ck_buy_orders_quantity   CHECK (quantity > 0),
            CONSTRAINT ck_buy_orders_price      CHECK (price >= 0),
            CONSTRAINT ck_buy_orders_currency   CHECK (currency IN ('ICA', 'CIS', 'AIC', 'NCC')),
            CONSTRAINT ck_buy_orders_visibility CHECK (visibility IN ('internal', 'partner'))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_buy_orders_updated_at
            BEFORE UPDATE ON buy_orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_sell_orders_commodity ON sell_orders (commodity_ticker, location_id);")
    op.execute("CREATE INDEX idx_buy_orders_commodity ON buy_orders (commodity_ticker, location_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS buy_orders CASCADE;")
    op.execute("DROP TABLE IF EXISTS sell_orders CASCADE;")
