"""Compile domain predicate trees into SQLAlchemy boolean expressions.

Member predicates compile against ``users_table``, team predicates against
``teams_table``. Multi-valued attributes (memberships, external roles and
groups, ancestors, requirements) live in child tables and are matched with
correlated EXISTS subqueries.
"""

from sqlalchemy import ColumnElement, String, and_, exists, false, func, not_, or_, select, true

from teamgate.domain.team.model.filter import (
    ExplicitMember,
    HasAllExternalRoles,
    HasAncestorIn,
    HasAnyExternalGroup,
    ImplicitMembersEnabled,
    MatchNothing,
    MemberAllOf,
    MemberAnyOf,
    MemberPredicate,
    NameContains,
    NotExplicitMember,
    RequiredExternalRolesWithin,
    RequiredExternalTeamsIntersect,
    TeamAllOf,
    TeamIdIn,
    TeamIdNotIn,
    TeamPredicate,
    TeamTextContains,
)
from teamgate.domain.team.model.value import TeamId
from teamgate.infrastructure.persistence.tables import (
    team_ancestors_table,
    team_memberships_table,
    team_required_external_roles_table,
    team_required_external_teams_table,
    teams_table,
    user_external_groups_table,
    user_external_roles_table,
    users_table,
)


def _ids(ids: tuple[TeamId, ...]) -> list[str]:
    return [str(i) for i in ids]


def _contains(column: ColumnElement, text: str) -> ColumnElement[bool]:
    return func.lower(column, type_=String).contains(text.lower(), autoescape=True)


def _membership_exists(team_id: TeamId, roles: tuple | None = None) -> ColumnElement[bool]:
    m = team_memberships_table
    conditions = [m.c.user_id == users_table.c.id, m.c.team_id == str(team_id)]
    if roles is not None:
        conditions.append(m.c.role.in_([r.label for r in roles]))
    return exists(select(m.c.user_id).where(*conditions))


def compile_member_predicate(predicate: MemberPredicate) -> ColumnElement[bool]:
    """Translate a member predicate into a WHERE clause over ``users_table``."""
    if isinstance(predicate, ExplicitMember):
        return _membership_exists(predicate.team_id, predicate.roles)

    if isinstance(predicate, NotExplicitMember):
        return not_(_membership_exists(predicate.team_id))

    if isinstance(predicate, HasAllExternalRoles):
        if not predicate.roles:
            return false()
        r = user_external_roles_table
        owned = r.c.user_id == users_table.c.id
        return and_(
            *(
                exists(select(r.c.user_id).where(owned, r.c.value == role))
                for role in dict.fromkeys(predicate.roles)
            )
        )

    if isinstance(predicate, HasAnyExternalGroup):
        if not predicate.groups:
            return false()
        g = user_external_groups_table
        return exists(
            select(g.c.user_id).where(
                g.c.user_id == users_table.c.id, g.c.value.in_(list(predicate.groups))
            )
        )

    if isinstance(predicate, NameContains):
        return or_(
            _contains(users_table.c.name, predicate.text),
            _contains(users_table.c.username, predicate.text),
            _contains(func.coalesce(users_table.c.email, ""), predicate.text),
        )

    if isinstance(predicate, MemberAllOf):
        return and_(true(), *(compile_member_predicate(p) for p in predicate.predicates))

    if isinstance(predicate, MemberAnyOf):
        return or_(false(), *(compile_member_predicate(p) for p in predicate.predicates))

    if isinstance(predicate, MatchNothing):
        return false()

    raise TypeError(f"Unsupported member predicate: {type(predicate).__name__}")


def compile_team_predicate(predicate: TeamPredicate) -> ColumnElement[bool]:
    """Translate a team predicate into a WHERE clause over ``teams_table``."""
    if isinstance(predicate, ImplicitMembersEnabled):
        return teams_table.c.implicit_members == true()

    if isinstance(predicate, RequiredExternalRolesWithin):
        r = team_required_external_roles_table
        owned = r.c.team_id == teams_table.c.id
        return and_(
            exists(select(r.c.team_id).where(owned)),
            not_(
                exists(select(r.c.team_id).where(owned, r.c.value.not_in(list(predicate.values))))
            ),
        )

    if isinstance(predicate, RequiredExternalTeamsIntersect):
        if not predicate.values:
            return false()
        t = team_required_external_teams_table
        return exists(
            select(t.c.team_id).where(
                t.c.team_id == teams_table.c.id, t.c.value.in_(list(predicate.values))
            )
        )

    if isinstance(predicate, TeamIdIn):
        if not predicate.ids:
            return false()
        return teams_table.c.id.in_(_ids(predicate.ids))

    if isinstance(predicate, TeamIdNotIn):
        if not predicate.ids:
            return true()
        return teams_table.c.id.not_in(_ids(predicate.ids))

    if isinstance(predicate, HasAncestorIn):
        if not predicate.ids:
            return false()
        a = team_ancestors_table
        return exists(
            select(a.c.team_id).where(
                a.c.team_id == teams_table.c.id, a.c.ancestor_id.in_(_ids(predicate.ids))
            )
        )

    if isinstance(predicate, TeamTextContains):
        return or_(
            _contains(teams_table.c.name, predicate.text),
            _contains(teams_table.c.description, predicate.text),
        )

    if isinstance(predicate, TeamAllOf):
        return and_(true(), *(compile_team_predicate(p) for p in predicate.predicates))

    raise TypeError(f"Unsupported team predicate: {type(predicate).__name__}")
