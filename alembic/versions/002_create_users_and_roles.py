"""002: create users, roles, user_roles, role_permissions

Revision ID: 002
Revises: 001
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              BIGSERIAL       PRIMARY KEY,
            username        VARCHAR(64)     NOT NULL,
            display_name    VARCHAR(100),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_username    UNIQUE (username)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE roles (
            id              VARCHAR(50)     PRIMARY KEY,
            name            VARCHAR(100)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TABLE user_roles (
            user_id         BIGINT          NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            role_id         VARCHAR(50)     NOT NULL REFERENCES roles (id) ON DELETE CASCADE,
            PRIMARY KEY (user_id, role_id)
        );
    """)
    # allowed = FALSE is an explicit deny and beats any grant from another role
    op.execute("""
        CREATE TABLE role_permissions (
            role_id         VARCHAR(50)     NOT NULL REFERENCES roles (id) ON DELETE CASCADE,
            permission_id   VARCHAR(100)    NOT NULL,
            allowed         BOOLEAN         NOT NULL DEFAULT TRUE,
            PRIMARY KEY (role_id, permission_id)
        );
    """)
    op.execute("CREATE INDEX idx_user_roles_role ON user_roles (role_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS role_permissions CASCADE;")
    op.execute("DROP TABLE IF EXISTS user_roles CASCADE;")
    op.execute("DROP TABLE IF EXISTS roles CASCADE;")
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
