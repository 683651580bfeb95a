"""SQLAlchemy table definitions for Plan Tour.

These table definitions are used with SQLAlchemy Core and the manual
mappers. They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# PROFILES TABLE (one per authenticated user)
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("email", String(320), nullable=False),
    Column("display_name", String(100), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_profiles_email", profiles_table.c.email)

# ============================================================================
# TOURS TABLE
# ============================================================================
tours_table = Table(
    "tours",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column(
        "owner_id", UUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    ),
    Column("title", Text, nullable=False),
    Column(
        "status",
        Enum("active", "archived", name="tour_status", create_type=False),
        nullable=False,
        server_default="active",
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_tours_owner_id", tours_table.c.owner_id)

# ============================================================================
# PARTICIPANTS TABLE
# ============================================================================
participants_table = Table(
    "participants",
    metadata,
    Column(
        "tour_id", UUID, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "user_id", UUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # Safety net for concurrent accepts
    PrimaryKeyConstraint("tour_id", "user_id", name="pk_participants"),
)

Index("idx_participants_user_id", participants_table.c.user_id)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column(
        "tour_id", UUID, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "inviter_id",
        UUID,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("email", String(320), nullable=False),  # Stored lower-cased
    Column(
        "status",
        Enum(
            "pending",
            "accepted",
            "declined",
            name="invitation_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
    Column("token", String(64), nullable=True, unique=True),  # Cleared once answered
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "expires_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default="NOW() + INTERVAL '7 days'",
    ),
    UniqueConstraint("tour_id", "email", name="uq_invitations_tour_email"),
)

Index("idx_invitations_email_status", invitations_table.c.email, invitations_table.c.status)
