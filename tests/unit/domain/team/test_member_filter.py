"""Tests for member-search predicate construction."""

from uuid import uuid4

import pytest

from teamgate.config import ImplicitMemberStrategy
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId
from teamgate.domain.team.model.filter import (
    ExplicitMember,
    HasAllExternalRoles,
    HasAnyExternalGroup,
    MatchNothing,
    MemberAllOf,
    MemberAnyOf,
    NameContains,
    NotExplicitMember,
)
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import MemberType, TeamMembership
from teamgate.domain.team.service.member_filter import build_member_filter, implicit_member_filter

ROLES = ImplicitMemberStrategy.ROLES


def _make_team(**kwargs) -> Team:
    return Team.create("T", implicit_members=True, requires_external_roles=["staff"], **kwargs)


def _make_user(team: Team, role: TeamRole | None = None, **kwargs) -> User:
    teams = [TeamMembership(team_id=team.id, role=role)] if role is not None else []
    return User(id=UserId(uuid4()), teams=teams, **kwargs)


class TestImplicitMemberFilter:
    def test_roles_strategy(self) -> None:
        team = _make_team()

        assert implicit_member_filter(team, ROLES) == MemberAllOf(
            predicates=(HasAllExternalRoles(roles=("staff",)), NotExplicitMember(team_id=team.id))
        )

    def test_teams_strategy(self) -> None:
        team = Team.create("T", implicit_members=True, requires_external_teams=["g"])

        predicate = implicit_member_filter(team, ImplicitMemberStrategy.TEAMS)

        assert predicate == MemberAllOf(
            predicates=(HasAnyExternalGroup(groups=("g",)), NotExplicitMember(team_id=team.id))
        )

    @pytest.mark.parametrize(
        "team, strategy",
        [
            (Team.create("Off", requires_external_roles=["staff"]), ROLES),
            (Team.create("Empty", implicit_members=True), ROLES),
            (Team.create("None", implicit_members=True, requires_external_roles=["a"]),
             ImplicitMemberStrategy.NONE),
            (Team.create("Mismatch", implicit_members=True, requires_external_roles=["a"]),
             ImplicitMemberStrategy.TEAMS),
        ],
    )
    def test_no_implicit_members(self, team: Team, strategy: ImplicitMemberStrategy) -> None:
        assert implicit_member_filter(team, strategy) is None


class TestBuildMemberFilter:
    def test_no_criteria_matches_explicit_and_implicit(self) -> None:
        team = _make_team()

        predicate = build_member_filter(team, ROLES)

        assert isinstance(predicate, MemberAnyOf)
        assert predicate.predicates[1] == ExplicitMember(team_id=team.id)
        assert predicate.matches(_make_user(team, TeamRole.BLOCKED))
        assert predicate.matches(_make_user(team, external_roles=["staff"]))
        assert not predicate.matches(_make_user(team))

    def test_no_criteria_without_implicit_members(self) -> None:
        team = Team.create("T")

        assert build_member_filter(team, ROLES) == ExplicitMember(team_id=team.id)

    def test_types_and_roles(self) -> None:
        team = _make_team()

        predicate = build_member_filter(
            team, ROLES, types=["implicit", "explicit"], roles=[TeamRole.MEMBER]
        )

        assert predicate.matches(_make_user(team, external_roles=["staff"]))
        assert predicate.matches(_make_user(team, TeamRole.MEMBER))
        assert not predicate.matches(_make_user(team, TeamRole.ADMIN))

    def test_implicit_type_with_admin_role_matches_nothing(self) -> None:
        team = _make_team()

        predicate = build_member_filter(
            team, ROLES, types=[MemberType.IMPLICIT], roles=[TeamRole.ADMIN]
        )

        assert predicate == MatchNothing()
        assert not predicate.matches(_make_user(team, TeamRole.ADMIN, external_roles=["staff"]))

    def test_types_only(self) -> None:
        team = _make_team()

        implicit_only = build_member_filter(team, ROLES, types=[MemberType.IMPLICIT])
        explicit_only = build_member_filter(team, ROLES, types=[MemberType.EXPLICIT])

        qualifying = _make_user(team, external_roles=["staff"])
        explicit = _make_user(team, TeamRole.VIEWER, external_roles=["staff"])
        assert implicit_only.matches(qualifying)
        assert not implicit_only.matches(explicit)
        assert explicit_only.matches(explicit)
        assert not explicit_only.matches(qualifying)

    def test_roles_only(self) -> None:
        team = _make_team()

        editors = build_member_filter(team, ROLES, roles=[TeamRole.EDITOR])
        members = build_member_filter(team, ROLES, roles=[TeamRole.MEMBER])

        assert editors == ExplicitMember(team_id=team.id, roles=(TeamRole.EDITOR,))
        assert members.matches(_make_user(team, external_roles=["staff"]))
        assert members.matches(_make_user(team, TeamRole.MEMBER))

    def test_base_is_anded(self) -> None:
        team = Team.create("T")
        base = NameContains(text="ada")

        predicate = build_member_filter(team, ROLES, base=base)

        assert predicate == MemberAllOf(predicates=(base, ExplicitMember(team_id=team.id)))
        assert predicate.matches(_make_user(team, TeamRole.MEMBER, name="Ada Lovelace"))
        assert not predicate.matches(_make_user(team, TeamRole.MEMBER, name="Grace"))

    def test_does_not_mutate_team(self) -> None:
        team = _make_team()
        before = team.model_dump()

        build_member_filter(team, ROLES, types=[MemberType.IMPLICIT], roles=[TeamRole.MEMBER])

        assert team.model_dump() == before
