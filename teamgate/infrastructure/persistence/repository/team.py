"""SQLAlchemy repository implementation for the team domain."""

from collections import defaultdict
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamgate.domain.auth.model.value import UserId
from teamgate.domain.team.model.filter import TeamPredicate
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import TeamId
from teamgate.domain.team.port.repository import TeamRepository
from teamgate.infrastructure.persistence.compiler import compile_team_predicate
from teamgate.infrastructure.persistence.tables import (
    team_ancestors_table,
    team_required_external_roles_table,
    team_required_external_teams_table,
    teams_table,
)


def _row_to_team(
    row: dict,
    ancestors: list[str],
    required_roles: list[str],
    required_teams: list[str],
) -> Team:
    """Convert a database row plus its child rows to a Team model."""
    return Team(
        id=TeamId(UUID(row["id"])),
        name=row["name"],
        description=row["description"] or "",
        creator_id=UserId(UUID(row["creator_id"])) if row["creator_id"] else None,
        creator_name=row["creator_name"],
        implicit_members=row["implicit_members"],
        requires_external_roles=required_roles,
        requires_external_teams=required_teams,
        parent_id=TeamId(UUID(row["parent_id"])) if row["parent_id"] else None,
        ancestors=[TeamId(UUID(a)) for a in ancestors],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _team_to_dict(team: Team) -> dict:
    """Convert a Team model to a database row dict."""
    return {
        "id": str(team.id),
        "name": team.name,
        "description": team.description,
        "creator_id": str(team.creator_id) if team.creator_id else None,
        "creator_name": team.creator_name,
        "implicit_members": team.implicit_members,
        "parent_id": str(team.parent_id) if team.parent_id else None,
        "created_at": team.created_at,
        "updated_at": team.updated_at,
    }


class SQLAlchemyTeamRepository(TeamRepository):
    """SQLAlchemy implementation of TeamRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, team_id: TeamId) -> Team | None:
        teams = await self._load([str(team_id)])
        return teams[0] if teams else None

    async def save(self, team: Team) -> None:
        team_dict = _team_to_dict(team)
        existing = await self.session.execute(
            select(teams_table.c.id).where(teams_table.c.id == str(team.id))
        )

        if existing.first() is not None:
            stmt = update(teams_table).where(teams_table.c.id == str(team.id)).values(**team_dict)
            await self.session.execute(stmt)
        else:
            await self.session.execute(insert(teams_table).values(**team_dict))
            # Ancestors are fixed at creation
            if team.ancestors:
                await self.session.execute(
                    insert(team_ancestors_table),
                    [
                        {"team_id": str(team.id), "ancestor_id": str(a), "position": i}
                        for i, a in enumerate(team.ancestors)
                    ],
                )

        await self._replace_values(
            team_required_external_roles_table, team.id, team.requires_external_roles
        )
        await self._replace_values(
            team_required_external_teams_table, team.id, team.requires_external_teams
        )
        await self.session.flush()

    async def delete(self, team_id: TeamId) -> bool:
        for table in (
            team_ancestors_table,
            team_required_external_roles_table,
            team_required_external_teams_table,
        ):
            await self.session.execute(delete(table).where(table.c.team_id == str(team_id)))
        result = await self.session.execute(
            delete(teams_table).where(teams_table.c.id == str(team_id))
        )
        await self.session.flush()
        return result.rowcount > 0

    async def distinct_ids(self, predicate: TeamPredicate) -> list[TeamId]:
        stmt = (
            select(teams_table.c.id)
            .where(compile_team_predicate(predicate))
            .distinct()
            .order_by(teams_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [TeamId(UUID(team_id)) for team_id in result.scalars()]

    async def search(
        self,
        predicate: TeamPredicate | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Team], int]:
        where = compile_team_predicate(predicate) if predicate is not None else None

        count_stmt = select(func.count()).select_from(teams_table)
        page_stmt = select(teams_table.c.id)
        if where is not None:
            count_stmt = count_stmt.where(where)
            page_stmt = page_stmt.where(where)

        total = (await self.session.execute(count_stmt)).scalar_one()
        page_stmt = page_stmt.order_by(teams_table.c.name, teams_table.c.id)
        page_stmt = page_stmt.offset(offset).limit(limit)
        ids = list((await self.session.execute(page_stmt)).scalars())
        return await self._load(ids), total

    async def _replace_values(self, table, team_id: TeamId, values: list[str]) -> None:
        await self.session.execute(delete(table).where(table.c.team_id == str(team_id)))
        unique = list(dict.fromkeys(values))
        if unique:
            await self.session.execute(
                insert(table), [{"team_id": str(team_id), "value": v} for v in unique]
            )

    async def _load(self, ids: list[str]) -> list[Team]:
        """Load teams with their child rows, preserving the order of ``ids``."""
        if not ids:
            return []

        rows = await self.session.execute(select(teams_table).where(teams_table.c.id.in_(ids)))
        by_id = {row["id"]: dict(row) for row in rows.mappings()}

        ancestors: dict[str, list[str]] = defaultdict(list)
        result = await self.session.execute(
            select(team_ancestors_table)
            .where(team_ancestors_table.c.team_id.in_(ids))
            .order_by(team_ancestors_table.c.team_id, team_ancestors_table.c.position)
        )
        for row in result.mappings():
            ancestors[row["team_id"]].append(row["ancestor_id"])

        required_roles = await self._load_values(team_required_external_roles_table, ids)
        required_teams = await self._load_values(team_required_external_teams_table, ids)

        return [
            _row_to_team(
                by_id[team_id],
                ancestors[team_id],
                required_roles[team_id],
                required_teams[team_id],
            )
            for team_id in ids
            if team_id in by_id
        ]

    async def _load_values(self, table, ids: list[str]) -> dict[str, list[str]]:
        values: dict[str, list[str]] = defaultdict(list)
        result = await self.session.execute(
            select(table.c.team_id, table.c.value)
            .where(table.c.team_id.in_(ids))
            .order_by(table.c.team_id, table.c.value)
        )
        for row in result.mappings():
            values[row["team_id"]].append(row["value"])
        return values
