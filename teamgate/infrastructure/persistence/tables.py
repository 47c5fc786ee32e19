"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.types import JSON

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False, default=""),
    Column("username", String, nullable=False, default=""),
    Column("email", String, nullable=True),
    Column("bypass_access_check", Boolean, nullable=False, default=False),
    Column("roles", JSON, nullable=False),  # system role -> granted
    Column("local_roles", JSON, nullable=False),
)

Index("idx_users_name", users_table.c.name)

user_external_roles_table = Table(
    "user_external_roles",
    metadata,
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("value", String, primary_key=True),
)

user_external_groups_table = Table(
    "user_external_groups",
    metadata,
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("value", String, primary_key=True),
)


# ============================================================================
# TEAMS TABLE
# ============================================================================
teams_table = Table(
    "teams",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("creator_id", String, nullable=True),
    Column("creator_name", String, nullable=True),
    Column("implicit_members", Boolean, nullable=False, default=False),
    Column("parent_id", String, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

Index("idx_teams_name", teams_table.c.name)
Index("idx_teams_implicit_members", teams_table.c.implicit_members)

# Denormalized parent chain, frozen at creation; position 0 is the root
team_ancestors_table = Table(
    "team_ancestors",
    metadata,
    Column("team_id", String, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("ancestor_id", String, primary_key=True),
    Column("position", Integer, nullable=False),
)

Index("idx_team_ancestors_ancestor_id", team_ancestors_table.c.ancestor_id)

team_required_external_roles_table = Table(
    "team_required_external_roles",
    metadata,
    Column("team_id", String, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("value", String, primary_key=True),
)

team_required_external_teams_table = Table(
    "team_required_external_teams",
    metadata,
    Column("team_id", String, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("value", String, primary_key=True),
)


# ============================================================================
# TEAM MEMBERSHIPS TABLE (explicit roles only; implicit membership is computed)
# ============================================================================
team_memberships_table = Table(
    "team_memberships",
    metadata,
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("team_id", String, primary_key=True),
    Column("role", String(16), nullable=False),  # TeamRole name, lower-case
)

Index(
    "idx_team_memberships_team_role",
    team_memberships_table.c.team_id,
    team_memberships_table.c.role,
)
