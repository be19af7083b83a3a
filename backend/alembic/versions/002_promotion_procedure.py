"""Install manual_promote_waitlist() on PostgreSQL

Revision ID: 002_promotion_procedure
Revises: 001_slots_and_notifications
Create Date: 2026-10-18 00:00:01.000000

"""

from alembic import op

from pitchside.db_functions import PROMOTE_WAITLIST_FUNCTION_SQL

# revision identifiers, used by Alembic.
revision = "002_promotion_procedure"
down_revision = "001_slots_and_notifications"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Other dialects run the in-app fallback promotion
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute(PROMOTE_WAITLIST_FUNCTION_SQL)


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("DROP FUNCTION IF EXISTS manual_promote_waitlist(integer)")
