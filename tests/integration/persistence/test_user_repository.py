"""SQLite tests for SQLAlchemyUserRepository and member search predicates."""

from uuid import uuid4

import pytest

from teamgate.config import ImplicitMemberStrategy
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId
from teamgate.domain.team.model.filter import (
    ExplicitMember,
    HasAllExternalRoles,
    MatchNothing,
    NameContains,
)
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import MemberType, TeamId, TeamMembership
from teamgate.domain.team.service.member_filter import build_member_filter
from teamgate.infrastructure.persistence.repository.user import SQLAlchemyUserRepository


def _make_user(name: str, *memberships: tuple[Team, TeamRole], **kwargs) -> User:
    return User(
        id=UserId(uuid4()),
        name=name,
        username=name.lower(),
        teams=[TeamMembership(team_id=t.id, role=r) for t, r in memberships],
        **kwargs,
    )


async def _save(repo: SQLAlchemyUserRepository, *users: User) -> None:
    for user in users:
        await repo.save(user)


class TestSaveAndGet:
    @pytest.mark.asyncio
    async def test_round_trip(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T")
        user = _make_user(
            "Ada",
            (team, TeamRole.EDITOR),
            email="ada@example.org",
            external_roles=["staff", "dev"],
            external_groups=["g"],
            roles={"admin": True},
        )
        await repo.save(user)

        loaded = await repo.get(user.id)

        assert loaded.name == "Ada"
        assert loaded.email == "ada@example.org"
        assert loaded.teams == [TeamMembership(team_id=team.id, role=TeamRole.EDITOR)]
        assert loaded.external_roles == ["dev", "staff"]
        assert loaded.external_groups == ["g"]
        assert loaded.roles == {"admin": True}
        assert loaded.team_cache is None

    @pytest.mark.asyncio
    async def test_save_twice_updates(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        user = _make_user("Ada", external_roles=["a"])
        await repo.save(user)

        user.name = "Ada L."
        user.external_roles = ["b"]
        await repo.save(user)
        loaded = await repo.get(user.id)

        assert loaded.name == "Ada L."
        assert loaded.external_roles == ["b"]

    @pytest.mark.asyncio
    async def test_missing_user(self, sqlite_session) -> None:
        assert await SQLAlchemyUserRepository(sqlite_session).get(UserId(uuid4())) is None


class TestMemberships:
    @pytest.mark.asyncio
    async def test_membership_rows_are_written_one_at_a_time(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        a, b, c = Team.create("A"), Team.create("B"), Team.create("C")
        user = _make_user("Ada", (a, TeamRole.ADMIN))
        await repo.save(user)

        await repo.add_membership(user.id, TeamMembership(team_id=b.id, role="requester"))
        assert await repo.set_membership_role(user.id, b.id, TeamRole.EDITOR) is True
        assert await repo.set_membership_role(user.id, c.id, TeamRole.EDITOR) is False
        assert await repo.remove_membership(user.id, a.id) is True
        assert await repo.remove_membership(user.id, a.id) is False
        loaded = await repo.get(user.id)

        assert loaded.teams == [TeamMembership(team_id=b.id, role=TeamRole.EDITOR)]

    @pytest.mark.asyncio
    async def test_add_membership_overwrites_existing_role(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T")
        user = _make_user("Ada", (team, TeamRole.REQUESTER))
        await repo.save(user)

        await repo.add_membership(user.id, TeamMembership(team_id=team.id, role=TeamRole.MEMBER))
        loaded = await repo.get(user.id)

        assert loaded.teams == [TeamMembership(team_id=team.id, role=TeamRole.MEMBER)]

    @pytest.mark.asyncio
    async def test_adds_from_stale_copies_are_both_kept(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        a, b = Team.create("A"), Team.create("B")
        user = _make_user("Ada")
        await repo.save(user)
        first_copy = await repo.get(user.id)
        second_copy = await repo.get(user.id)

        first_copy.add_membership(a.id, TeamRole.MEMBER)
        await repo.add_membership(first_copy.id, first_copy.teams[0])
        second_copy.add_membership(b.id, TeamRole.VIEWER)
        await repo.add_membership(second_copy.id, second_copy.teams[0])
        loaded = await repo.get(user.id)

        assert {(m.team_id, m.role) for m in loaded.teams} == {
            (a.id, TeamRole.MEMBER),
            (b.id, TeamRole.VIEWER),
        }

    @pytest.mark.asyncio
    async def test_find_by_team_role(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T")
        first = _make_user("First", (team, TeamRole.ADMIN))
        second = _make_user("Second", (team, TeamRole.ADMIN))
        editor = _make_user("Editor", (team, TeamRole.EDITOR))
        await _save(repo, first, second, editor)

        admins = await repo.find_by_team_role(team.id, TeamRole.ADMIN)
        others = await repo.find_by_team_role(
            team.id, TeamRole.ADMIN, exclude_user_id=first.id, for_update=True
        )

        assert {u.id for u in admins} == {first.id, second.id}
        assert [u.id for u in others] == [second.id]
        assert await repo.find_by_team_role(TeamId.generate(), TeamRole.ADMIN) == []

    @pytest.mark.asyncio
    async def test_remove_team_memberships(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        doomed, kept = Team.create("Doomed"), Team.create("Kept")
        ada = _make_user("Ada", (doomed, TeamRole.ADMIN), (kept, TeamRole.MEMBER))
        bob = _make_user("Bob", (doomed, TeamRole.VIEWER))
        await _save(repo, ada, bob)

        removed = await repo.remove_team_memberships(doomed.id)

        assert removed == 2
        assert (await repo.get(ada.id)).teams == [
            TeamMembership(team_id=kept.id, role=TeamRole.MEMBER)
        ]
        assert (await repo.get(bob.id)).teams == []


class TestMemberSearch:
    @pytest.mark.asyncio
    async def test_explicit_roles(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T")
        admin = _make_user("Admin", (team, TeamRole.ADMIN))
        viewer = _make_user("Viewer", (team, TeamRole.VIEWER))
        outsider = _make_user("Outsider")
        await _save(repo, admin, viewer, outsider)

        users, total = await repo.search(
            ExplicitMember(team_id=team.id, roles=(TeamRole.ADMIN, TeamRole.EDITOR))
        )

        assert total == 1
        assert [u.id for u in users] == [admin.id]

    @pytest.mark.asyncio
    async def test_all_external_roles_required(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        both = _make_user("Both", external_roles=["a", "b"])
        one = _make_user("One", external_roles=["a"])
        await _save(repo, both, one)

        users, _ = await repo.search(HasAllExternalRoles(roles=("a", "b")))

        assert [u.id for u in users] == [both.id]

    @pytest.mark.asyncio
    async def test_match_nothing(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        await repo.save(_make_user("Ada"))

        assert await repo.search(MatchNothing()) == ([], 0)

    @pytest.mark.asyncio
    async def test_member_filter_end_to_end(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T", implicit_members=True, requires_external_roles=["staff"])
        explicit_admin = _make_user("Alice", (team, TeamRole.ADMIN), external_roles=["staff"])
        implicit = _make_user("Bob", external_roles=["staff"])
        blocked = _make_user("Carol", (team, TeamRole.BLOCKED), external_roles=["staff"])
        outsider = _make_user("Dave")
        await _save(repo, explicit_admin, implicit, blocked, outsider)
        strategy = ImplicitMemberStrategy.ROLES

        everyone, total = await repo.search(build_member_filter(team, strategy))
        implicit_only, _ = await repo.search(
            build_member_filter(team, strategy, types=[MemberType.IMPLICIT])
        )
        implicit_admins, implicit_admin_total = await repo.search(
            build_member_filter(team, strategy, types=[MemberType.IMPLICIT], roles=[TeamRole.ADMIN])
        )

        assert total == 3
        assert [u.name for u in everyone] == ["Alice", "Bob", "Carol"]
        assert [u.name for u in implicit_only] == ["Bob"]
        assert (implicit_admins, implicit_admin_total) == ([], 0)

    @pytest.mark.asyncio
    async def test_name_search_and_paging(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T")
        users = [_make_user(f"Member {i}", (team, TeamRole.MEMBER)) for i in range(4)]
        users.append(_make_user("Grace", (team, TeamRole.MEMBER), email="grace@MEMBER.org"))
        await _save(repo, *users)

        predicate = build_member_filter(
            team, ImplicitMemberStrategy.NONE, base=NameContains(text="member")
        )
        page, total = await repo.search(predicate, offset=3, limit=10)

        assert total == 5
        assert [u.name for u in page] == ["Member 2", "Member 3"]

    @pytest.mark.asyncio
    async def test_agrees_with_in_memory_evaluation(self, sqlite_session) -> None:
        repo = SQLAlchemyUserRepository(sqlite_session)
        team = Team.create("T", implicit_members=True, requires_external_teams=["g1", "g2"])
        users = [
            _make_user("A", (team, TeamRole.EDITOR)),
            _make_user("B", external_groups=["g2"]),
            _make_user("C", (team, TeamRole.REQUESTER), external_groups=["g1"]),
            _make_user("D", external_groups=["other"]),
        ]
        await _save(repo, *users)
        strategy = ImplicitMemberStrategy.TEAMS

        for types, roles in [
            ((), ()),
            ((MemberType.EXPLICIT,), ()),
            ((MemberType.IMPLICIT,), ()),
            ((), (TeamRole.MEMBER,)),
            ((MemberType.EXPLICIT, MemberType.IMPLICIT), (TeamRole.MEMBER, TeamRole.EDITOR)),
        ]:
            predicate = build_member_filter(team, strategy, types=types, roles=roles)
            found, _ = await repo.search(predicate)
            expected = {u.id for u in users if predicate.matches(u)}
            assert {u.id for u in found} == expected, (types, roles)
