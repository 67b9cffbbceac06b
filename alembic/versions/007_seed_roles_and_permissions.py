"""007: seed roles and their order/reservation permissions

Revision ID: 007
Revises: 006
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO roles (id, name) VALUES
            ('unverified', 'Unverified'),
            ('applicant', 'Applicant'),
            ('member', 'Member'),
            ('lead', 'Lead'),
            ('trade-partner', 'Trade Partner'),
            ('administrator', 'Administrator');
    """)
    # Applicants may browse but not trade; trade partners only see the
    # partner board. Administrators manage users, not orders.
    op.execute("""
        INSERT INTO role_permissions (role_id, permission_id, allowed) VALUES
            ('applicant', 'orders.view_internal', TRUE),
            ('applicant', 'orders.view_partner', TRUE),
            ('member', 'orders.view_internal', TRUE),
            ('member', 'orders.view_partner', TRUE),
            ('member', 'orders.post_internal', TRUE),
            ('member', 'reservations.place_internal', TRUE),
            ('lead', 'orders.view_internal', TRUE),
            ('lead', 'orders.view_partner', TRUE),
            ('lead', 'orders.post_internal', TRUE),
            ('lead', 'orders.post_partner', TRUE),
            ('lead', 'reservations.place_internal', TRUE),
            ('lead', 'reservations.place_partner', TRUE),
            ('trade-partner', 'orders.view_partner', TRUE),
            ('trade-partner', 'orders.post_partner', TRUE),
            ('trade-partner', 'reservations.place_partner', TRUE),
            ('administrator', 'orders.view_internal', TRUE),
            ('administrator', 'orders.view_partner', TRUE);
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM roles WHERE id IN (
            'unverified', 'applicant', 'member', 'lead', 'trade-partner', 'administrator'
        );
    """)
