"""Tests for implicit membership evaluation."""

from uuid import uuid4

import pytest

from teamgate.config import ImplicitMembersConfig, ImplicitMemberStrategy, TeamsConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.service.implicit import ImplicitMembershipEvaluator


def _make_evaluator(strategy: ImplicitMemberStrategy) -> ImplicitMembershipEvaluator:
    config = TeamsConfig(implicit_members=ImplicitMembersConfig(strategy=strategy))
    return ImplicitMembershipEvaluator(config=config)


def _make_user(**kwargs) -> User:
    return User(id=UserId(uuid4()), **kwargs)


class TestExternalTeams:
    def test_any_group_in_common_qualifies(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.TEAMS)
        team = Team.create("T", implicit_members=True, requires_external_teams=["a", "b"])
        user = _make_user(external_groups=["b", "z"])

        assert evaluator.meets_required_external_teams(user, team)
        assert evaluator.is_implicit_member(user, team)

    def test_no_common_group(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.TEAMS)
        team = Team.create("T", implicit_members=True, requires_external_teams=["a"])

        assert not evaluator.is_implicit_member(_make_user(external_groups=["b"]), team)

    def test_empty_requirement_never_matches(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.TEAMS)
        team = Team.create("T", implicit_members=True)

        assert not evaluator.is_implicit_member(_make_user(external_groups=["a"]), team)

    def test_bypass_access_check_always_qualifies(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.TEAMS)
        team = Team.create("T", implicit_members=True)

        assert evaluator.is_implicit_member(_make_user(bypass_access_check=True), team)


class TestExternalRoles:
    def test_all_roles_required(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.ROLES)
        team = Team.create("T", implicit_members=True, requires_external_roles=["a", "b"])

        assert not evaluator.is_implicit_member(_make_user(external_roles=["a"]), team)
        assert evaluator.is_implicit_member(_make_user(external_roles=["b", "a", "c"]), team)

    def test_empty_requirement_never_matches(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.ROLES)
        team = Team.create("T", implicit_members=True)

        assert not evaluator.is_implicit_member(_make_user(external_roles=["a"]), team)

    def test_bypass_does_not_apply_to_roles(self) -> None:
        evaluator = _make_evaluator(ImplicitMemberStrategy.ROLES)
        team = Team.create("T", implicit_members=True, requires_external_roles=["a"])

        assert not evaluator.is_implicit_member(_make_user(bypass_access_check=True), team)


@pytest.mark.parametrize("bypass", [False, True])
def test_strategy_none_never_qualifies(bypass: bool) -> None:
    evaluator = _make_evaluator(ImplicitMemberStrategy.NONE)
    team = Team.create(
        "T", implicit_members=True, requires_external_roles=["a"], requires_external_teams=["g"]
    )
    user = _make_user(external_roles=["a"], external_groups=["g"], bypass_access_check=bypass)

    assert not evaluator.is_implicit_member(user, team)
