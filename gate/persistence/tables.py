"""SQLAlchemy table definitions for gate.

They match the schema created by the Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# OPERATORS TABLE (dashboard credential records)
# ============================================================================
operators_table = Table(
    "operators",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    # Always stored lowercased and trimmed
    Column("email", String(320), nullable=False),
    # NULL until the operator registers
    Column("password_hash", Text, nullable=True),
    # Weak reference to the identity provider account
    Column("identity_id", String(255), nullable=True),
    Column("reset_token", String(255), nullable=True),
    Column("reset_token_expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("store_id", UUID, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("email", name="uq_operators_email"),
    CheckConstraint("email = lower(btrim(email))", name="ck_operators_email_lowercase"),
    CheckConstraint(
        "(reset_token IS NULL) = (reset_token_expires_at IS NULL)",
        name="ck_operators_reset_token_pair",
    ),
)

Index("idx_operators_identity_id", operators_table.c.identity_id)
Index("idx_operators_store_id", operators_table.c.store_id)
