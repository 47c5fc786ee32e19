"""DI provider for the team and auth domains."""

from dishka import Provider, from_context, provide

from teamgate.config import AuthConfig, Config, TeamsConfig
from teamgate.domain.auth.command.login import LoginHandler
from teamgate.domain.auth.model.identity import Identity
from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.auth.service.authorization import UserAuthorizationService
from teamgate.domain.shared.error import AuthorizationError
from teamgate.domain.team.command.create import CreateTeamHandler
from teamgate.domain.team.command.delete import DeleteTeamHandler
from teamgate.domain.team.command.members import (
    AddTeamMembersHandler,
    RemoveTeamMemberHandler,
    UpdateMemberRoleHandler,
)
from teamgate.domain.team.command.request import (
    RequestNewTeamHandler,
    RequestTeamAccessHandler,
)
from teamgate.domain.team.command.update import UpdateTeamHandler
from teamgate.domain.team.query.get_team import GetTeamHandler
from teamgate.domain.team.query.search_members import SearchTeamMembersHandler
from teamgate.domain.team.query.search_teams import SearchTeamsHandler
from teamgate.domain.team.service.implicit import ImplicitMembershipEvaluator
from teamgate.domain.team.service.membership import MembershipResolver
from teamgate.domain.team.service.role_cache import TeamRoleCacheRebuilder
from teamgate.domain.team.service.team import TeamService
from teamgate.domain.team.service.team_ids import TeamIdResolver
from teamgate.util.di.scope import Scope


class TeamProvider(Provider):
    """DI provider for team services and handlers."""

    config = from_context(provides=Config, scope=Scope.APP)
    identity = from_context(provides=Identity, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_teams_config(self, config: Config) -> TeamsConfig:
        return config.teams

    @provide(scope=Scope.APP)
    def get_auth_config(self, config: Config) -> AuthConfig:
        return config.auth

    @provide(scope=Scope.UOW)
    def get_principal(self, identity: Identity) -> Principal:
        """The identified user behind this unit of work."""
        if not isinstance(identity, Principal):
            raise AuthorizationError("Authentication required", code="missing_user")
        return identity

    # Stateless services
    implicit_evaluator = provide(ImplicitMembershipEvaluator, scope=Scope.APP)
    membership_resolver = provide(MembershipResolver, scope=Scope.APP)
    user_authorization = provide(UserAuthorizationService, scope=Scope.APP)

    # Services bound to the unit of work's repositories
    team_id_resolver = provide(TeamIdResolver, scope=Scope.UOW)
    role_cache = provide(TeamRoleCacheRebuilder, scope=Scope.UOW)
    team_service = provide(TeamService, scope=Scope.UOW)

    # Command Handlers
    create_team_handler = provide(CreateTeamHandler, scope=Scope.UOW)
    update_team_handler = provide(UpdateTeamHandler, scope=Scope.UOW)
    delete_team_handler = provide(DeleteTeamHandler, scope=Scope.UOW)
    add_team_members_handler = provide(AddTeamMembersHandler, scope=Scope.UOW)
    update_member_role_handler = provide(UpdateMemberRoleHandler, scope=Scope.UOW)
    remove_team_member_handler = provide(RemoveTeamMemberHandler, scope=Scope.UOW)
    request_team_access_handler = provide(RequestTeamAccessHandler, scope=Scope.UOW)
    request_new_team_handler = provide(RequestNewTeamHandler, scope=Scope.UOW)
    login_handler = provide(LoginHandler, scope=Scope.UOW)

    # Query Handlers
    get_team_handler = provide(GetTeamHandler, scope=Scope.UOW)
    search_teams_handler = provide(SearchTeamsHandler, scope=Scope.UOW)
    search_team_members_handler = provide(SearchTeamMembersHandler, scope=Scope.UOW)
