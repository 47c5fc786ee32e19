"""SQLAlchemy repository implementation for users and their team memberships."""

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId
from teamgate.domain.auth.port.repository import UserRepository
from teamgate.domain.team.model.filter import MemberPredicate
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.value import TeamId, TeamMembership
from teamgate.infrastructure.persistence.compiler import compile_member_predicate
from teamgate.infrastructure.persistence.tables import (
    team_memberships_table,
    user_external_groups_table,
    user_external_roles_table,
    users_table,
)

logger = logging.getLogger(__name__)


def _row_to_membership(row: dict) -> TeamMembership:
    return TeamMembership(team_id=TeamId(UUID(row["team_id"])), role=TeamRole[row["role"].upper()])


def _membership_to_dict(user_id: UserId, membership: TeamMembership) -> dict:
    return {
        "user_id": str(user_id),
        "team_id": str(membership.team_id),
        "role": membership.role.label,
    }


def _row_to_user(
    row: dict,
    teams: list[TeamMembership],
    external_roles: list[str],
    external_groups: list[str],
) -> User:
    """Convert a database row plus its child rows to a User model."""
    return User(
        id=UserId(UUID(row["id"])),
        name=row["name"],
        username=row["username"],
        email=row["email"],
        teams=teams,
        external_roles=external_roles,
        external_groups=external_groups,
        bypass_access_check=row["bypass_access_check"],
        roles=row["roles"] or {},
        local_roles=row["local_roles"] or {},
    )


def _user_to_dict(user: User) -> dict:
    """Convert a User model to a database row dict."""
    return {
        "id": str(user.id),
        "name": user.name,
        "username": user.username,
        "email": user.email,
        "bypass_access_check": user.bypass_access_check,
        "roles": dict(user.roles),
        "local_roles": dict(user.local_roles),
    }


class SQLAlchemyUserRepository(UserRepository):
    """SQLAlchemy implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId) -> User | None:
        users = await self._load([str(user_id)])
        return users[0] if users else None

    async def save(self, user: User) -> None:
        user_dict = _user_to_dict(user)
        existing = await self.session.execute(
            select(users_table.c.id).where(users_table.c.id == str(user.id))
        )

        if existing.first() is not None:
            stmt = update(users_table).where(users_table.c.id == str(user.id)).values(**user_dict)
        else:
            stmt = insert(users_table).values(**user_dict)
        await self.session.execute(stmt)

        await self._replace_values(user_external_roles_table, user.id, user.external_roles)
        await self._replace_values(user_external_groups_table, user.id, user.external_groups)
        await self._replace_memberships(user.id, user.teams)

    async def find_by_team_role(
        self,
        team_id: TeamId,
        role: TeamRole,
        *,
        exclude_user_id: UserId | None = None,
        for_update: bool = False,
    ) -> list[User]:
        m = team_memberships_table
        stmt = select(m.c.user_id).where(m.c.team_id == str(team_id), m.c.role == role.label)

        if for_update:
            # Lock every matching row, the caller's own included, before filtering
            locked = await self.session.execute(stmt.with_for_update())
            logger.debug(
                "Locked %d %s memberships of team %s",
                len(locked.all()),
                role.label,
                team_id,
            )

        if exclude_user_id is not None:
            stmt = stmt.where(m.c.user_id != str(exclude_user_id))
        result = await self.session.execute(stmt.order_by(m.c.user_id))
        return await self._load(list(result.scalars()))

    async def add_membership(self, user_id: UserId, membership: TeamMembership) -> None:
        if not await self.set_membership_role(user_id, membership.team_id, membership.role):
            await self.session.execute(
                insert(team_memberships_table).values(**_membership_to_dict(user_id, membership))
            )
            await self.session.flush()

    async def set_membership_role(self, user_id: UserId, team_id: TeamId, role: TeamRole) -> bool:
        m = team_memberships_table
        result = await self.session.execute(
            update(m)
            .where(m.c.user_id == str(user_id), m.c.team_id == str(team_id))
            .values(role=role.label)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def remove_membership(self, user_id: UserId, team_id: TeamId) -> bool:
        m = team_memberships_table
        result = await self.session.execute(
            delete(m).where(m.c.user_id == str(user_id), m.c.team_id == str(team_id))
        )
        await self.session.flush()
        return result.rowcount > 0

    async def remove_team_memberships(self, team_id: TeamId) -> int:
        m = team_memberships_table
        result = await self.session.execute(delete(m).where(m.c.team_id == str(team_id)))
        await self.session.flush()
        return result.rowcount

    async def search(
        self,
        predicate: MemberPredicate,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        where = compile_member_predicate(predicate)
        count_stmt = select(func.count()).select_from(users_table).where(where)
        total = (await self.session.execute(count_stmt)).scalar_one()

        page_stmt = (
            select(users_table.c.id)
            .where(where)
            .order_by(users_table.c.name, users_table.c.id)
            .offset(offset)
            .limit(limit)
        )
        ids = list((await self.session.execute(page_stmt)).scalars())
        return await self._load(ids), total

    async def _replace_memberships(
        self, user_id: UserId, memberships: list[TeamMembership]
    ) -> None:
        m = team_memberships_table
        await self.session.execute(delete(m).where(m.c.user_id == str(user_id)))
        unique = {ms.team_id: ms for ms in memberships}
        if unique:
            await self.session.execute(
                insert(m), [_membership_to_dict(user_id, ms) for ms in unique.values()]
            )
        await self.session.flush()

    async def _replace_values(self, table, user_id: UserId, values: list[str]) -> None:
        await self.session.execute(delete(table).where(table.c.user_id == str(user_id)))
        unique = list(dict.fromkeys(values))
        if unique:
            await self.session.execute(
                insert(table), [{"user_id": str(user_id), "value": v} for v in unique]
            )

    async def _load(self, ids: list[str]) -> list[User]:
        """Load users with their child rows, preserving the order of ``ids``."""
        if not ids:
            return []

        rows = await self.session.execute(select(users_table).where(users_table.c.id.in_(ids)))
        by_id = {row["id"]: dict(row) for row in rows.mappings()}

        teams: dict[str, list[TeamMembership]] = defaultdict(list)
        m = team_memberships_table
        result = await self.session.execute(
            select(m).where(m.c.user_id.in_(ids)).order_by(m.c.user_id, m.c.team_id)
        )
        for row in result.mappings():
            teams[row["user_id"]].append(_row_to_membership(dict(row)))

        external_roles = await self._load_values(user_external_roles_table, ids)
        external_groups = await self._load_values(user_external_groups_table, ids)

        return [
            _row_to_user(by_id[i], teams[i], external_roles[i], external_groups[i])
            for i in ids
            if i in by_id
        ]

    async def _load_values(self, table, ids: list[str]) -> dict[str, list[str]]:
        values: dict[str, list[str]] = defaultdict(list)
        result = await self.session.execute(
            select(table.c.user_id, table.c.value)
            .where(table.c.user_id.in_(ids))
            .order_by(table.c.user_id, table.c.value)
        )
        for row in result.mappings():
            values[row["user_id"]].append(row["value"])
        return values
