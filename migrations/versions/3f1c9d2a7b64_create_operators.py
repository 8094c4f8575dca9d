"""create_operators

Create the operator credential table:
- one row per dashboard operator, unique by lowercased email
- password_hash NULL until the operator registers
- reset token and expiry set and cleared together (check constraint)

Revision ID: 3f1c9d2a7b64
Revises:
Create Date: 2026-10-19 10:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9d2a7b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "operators",
        sa.Column(
            "id",
            postgresql.UUID(),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("identity_id", sa.String(255), nullable=True),
        sa.Column("reset_token", sa.String(255), nullable=True),
        sa.Column(
            "reset_token_expires_at", postgresql.TIMESTAMP(timezone=True), nullable=True
        ),
        sa.Column("store_id", postgresql.UUID(), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.UniqueConstraint("email", name="uq_operators_email"),
        sa.CheckConstraint(
            "(reset_token IS NULL) = (reset_token_expires_at IS NULL)",
            name="ck_operators_reset_token_pair",
        ),
    )
    op.create_index("idx_operators_identity_id", "operators", ["identity_id"])
    op.create_index("idx_operators_store_id", "operators", ["store_id"])

    # Emails are compared lowercased; reject rows written any other way
    op.create_check_constraint(
        "ck_operators_email_lowercase", "operators", "email = lower(btrim(email))"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_operators_store_id", table_name="operators")
    op.drop_index("idx_operators_identity_id", table_name="operators")
    op.drop_table("operators")
