"""Initial schema: payment notification store.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── payment_notifications ─────────────────────────────────────────
    op.create_table(
        "payment_notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("payment_type", sa.String(32), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("status", sa.String(16), default="pending", nullable=False),
        sa.Column("transaction_id", sa.String(64), unique=True, nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("details", sa.JSON, nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "idx_payment_notifications_status", "payment_notifications", ["status"]
    )
    op.create_index(
        "idx_payment_notifications_user", "payment_notifications", ["user_id"]
    )


def downgrade() -> None:
    op.drop_table("payment_notifications")
