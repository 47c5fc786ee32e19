"""Team domain services."""

from .implicit import ImplicitMembershipEvaluator
from .member_filter import build_member_filter, implicit_member_filter
from .membership import MembershipResolver
from .role_cache import TeamRoleCacheRebuilder
from .team import MemberMatch, TeamMatch, TeamService
from .team_ids import TeamIdResolver

__all__ = [
    "ImplicitMembershipEvaluator",
    "MemberMatch",
    "MembershipResolver",
    "TeamIdResolver",
    "TeamMatch",
    "TeamRoleCacheRebuilder",
    "TeamService",
    "build_member_filter",
    "implicit_member_filter",
]
