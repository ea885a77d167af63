"""SQLAlchemy table definitions for the portal.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# Name of the constraint that arbitrates concurrent first logins
USERS_EXTERNAL_ID_CONSTRAINT = "uq_users_external_id"

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("external_id", String(64), nullable=False),  # SteamID64
    Column("display_name", Text, nullable=False),
    Column("profile_url", Text, nullable=False),
    Column("avatar_small", Text, nullable=False),
    Column("avatar_medium", Text, nullable=False),
    Column("avatar_large", Text, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "last_login_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default="NOW()",
    ),
    UniqueConstraint("external_id", name=USERS_EXTERNAL_ID_CONSTRAINT),
    CheckConstraint("created_at <= last_login_at", name="ck_users_login_after_create"),
)

# ============================================================================
# SESSIONS TABLE
# ============================================================================
sessions_table = Table(
    "sessions",
    metadata,
    Column("id", UUID, primary_key=True),
    Column(
        "external_id",
        String(64),
        ForeignKey("users.external_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
)

Index("idx_sessions_external_id", sessions_table.c.external_id)
Index("idx_sessions_expires_at", sessions_table.c.expires_at)
