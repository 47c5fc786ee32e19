"""Builds member-search predicates from "member type" and "role" criteria.

Both functions are pure: they read the team and return a new predicate tree.
"""

from collections.abc import Iterable

from teamgate.config import ImplicitMemberStrategy
from teamgate.domain.team.model.filter import (
    ExplicitMember,
    HasAllExternalRoles,
    HasAnyExternalGroup,
    MatchNothing,
    MemberAllOf,
    MemberAnyOf,
    MemberPredicate,
    NotExplicitMember,
)
from teamgate.domain.team.model.role import IMPLICIT_ROLE, TeamRole
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import MemberType


def implicit_member_filter(team: Team, strategy: ImplicitMemberStrategy) -> MemberPredicate | None:
    """Predicate matching the team's implicit members, or None if it has none.

    Users holding any explicit role in the team are excluded: their explicit
    role wins over the implicit one.
    """
    if not team.implicit_members:
        return None

    if strategy == ImplicitMemberStrategy.ROLES and team.requires_external_roles:
        qualifies: MemberPredicate = HasAllExternalRoles(roles=tuple(team.requires_external_roles))
    elif strategy == ImplicitMemberStrategy.TEAMS and team.requires_external_teams:
        qualifies = HasAnyExternalGroup(groups=tuple(team.requires_external_teams))
    else:
        return None

    return qualifies & NotExplicitMember(team_id=team.id)


def build_member_filter(
    team: Team,
    strategy: ImplicitMemberStrategy,
    types: Iterable[MemberType] = (),
    roles: Iterable[TeamRole] = (),
    base: MemberPredicate | None = None,
) -> MemberPredicate:
    """Predicate for "members of ``team``" narrowed by member type and role.

    With no criteria every current member matches. When the criteria cannot
    be satisfied (implicit members with role admin, say) the result is
    MatchNothing, never an empty filter. ``base`` is AND-ed in front.
    """
    types = {MemberType(t) for t in types}
    roles = tuple(dict.fromkeys(roles))
    implicit = implicit_member_filter(team, strategy)

    branches: list[MemberPredicate] = []
    if not types and not roles:
        if implicit is not None:
            branches.append(implicit)
        branches.append(ExplicitMember(team_id=team.id))
    elif types and roles:
        if MemberType.IMPLICIT in types and IMPLICIT_ROLE in roles and implicit is not None:
            branches.append(implicit)
        if MemberType.EXPLICIT in types:
            branches.append(ExplicitMember(team_id=team.id, roles=roles))
    elif types:
        if MemberType.IMPLICIT in types and implicit is not None:
            branches.append(implicit)
        if MemberType.EXPLICIT in types:
            branches.append(ExplicitMember(team_id=team.id))
    else:
        if IMPLICIT_ROLE in roles and implicit is not None:
            branches.append(implicit)
        branches.append(ExplicitMember(team_id=team.id, roles=roles))

    if not branches:
        members: MemberPredicate = MatchNothing()
    elif len(branches) == 1:
        members = branches[0]
    else:
        members = MemberAnyOf(predicates=tuple(branches))

    if base is None:
        return members
    return MemberAllOf(predicates=(base, members))
