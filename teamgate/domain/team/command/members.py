"""Membership commands: add, change role, remove."""

import logging

from pydantic import BaseModel

from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import team_role
from teamgate.domain.shared.command import Command, CommandHandler, Result
from teamgate.domain.shared.error import NotFoundError
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.value import RoleName
from teamgate.domain.team.service.team import TeamService

logger = logging.getLogger(__name__)


class NewMember(BaseModel):
    user_id: str
    role: RoleName = TeamRole.MEMBER


class AddTeamMembers(Command):
    team_id: str
    members: list[NewMember]


class MembersAdded(Result):
    added: list[str]
    skipped: list[str]  # Unknown user ids


class AddTeamMembersHandler(CommandHandler[AddTeamMembers, MembersAdded]):
    __auth__ = team_role(TeamRole.ADMIN)
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: AddTeamMembers) -> MembersAdded:
        team = await self.team_service.get(cmd.team_id)
        added: list[str] = []
        skipped: list[str] = []
        for member in cmd.members:
            try:
                user = await self.team_service.get_user(member.user_id)
            except NotFoundError:
                logger.info("Skipping unknown user %s for team %s", member.user_id, team.id)
                skipped.append(member.user_id)
                continue
            await self.team_service.add_member(user, team, member.role)
            added.append(str(user.id))
        return MembersAdded(added=added, skipped=skipped)


class UpdateMemberRole(Command):
    team_id: str
    user_id: str
    role: RoleName = TeamRole.MEMBER


class MemberRoleUpdated(Result):
    user_id: str
    role: str


class UpdateMemberRoleHandler(CommandHandler[UpdateMemberRole, MemberRoleUpdated]):
    __auth__ = team_role(TeamRole.ADMIN)
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: UpdateMemberRole) -> MemberRoleUpdated:
        team = await self.team_service.get(cmd.team_id)
        user = await self.team_service.get_user(cmd.user_id)
        await self.team_service.update_member_role(user, team, cmd.role)
        return MemberRoleUpdated(user_id=str(user.id), role=cmd.role.label)


class RemoveTeamMember(Command):
    team_id: str
    user_id: str


class MemberRemoved(Result):
    user_id: str


class RemoveTeamMemberHandler(CommandHandler[RemoveTeamMember, MemberRemoved]):
    __auth__ = team_role(TeamRole.ADMIN)
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: RemoveTeamMember) -> MemberRemoved:
        team = await self.team_service.get(cmd.team_id)
        user = await self.team_service.get_user(cmd.user_id)
        await self.team_service.remove_member(user, team)
        return MemberRemoved(user_id=str(user.id))
