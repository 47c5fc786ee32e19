"""Tests for system role resolution across role strategies."""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from teamgate.config import AuthConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import RoleStrategy, UserId
from teamgate.domain.auth.service.authorization import UserAuthorizationService


def _make_service(
    strategy: RoleStrategy, external_roles: set[str] | None = None
) -> UserAuthorizationService:
    provider = MagicMock()
    granted = external_roles or set()
    provider.has_role.side_effect = lambda user, role: role in granted
    return UserAuthorizationService(
        config=AuthConfig(role_strategy=strategy), provider=provider
    )


def _make_user(**roles: bool) -> User:
    return User(id=UserId(uuid4()), roles=roles)


class TestHasRole:
    def test_local_ignores_provider(self) -> None:
        service = _make_service(RoleStrategy.LOCAL, {"editor"})
        user = _make_user(auditor=True)

        assert service.has_role(user, "auditor")
        assert not service.has_role(user, "editor")
        service.provider.has_role.assert_not_called()

    def test_external_ignores_local_roles(self) -> None:
        service = _make_service(RoleStrategy.EXTERNAL, {"editor"})
        user = _make_user(auditor=True)

        assert service.has_role(user, "editor")
        assert not service.has_role(user, "auditor")

    def test_hybrid_accepts_either_source(self) -> None:
        service = _make_service(RoleStrategy.HYBRID, {"editor"})
        user = _make_user(auditor=True)

        assert service.has_role(user, "editor")
        assert service.has_role(user, "auditor")
        assert not service.has_role(user, "admin")

    def test_false_local_grant(self) -> None:
        service = _make_service(RoleStrategy.LOCAL)

        assert not service.has_role(_make_user(admin=False), "admin")


class TestRoleSets:
    def test_has_roles_requires_all(self) -> None:
        service = _make_service(RoleStrategy.LOCAL)
        user = _make_user(editor=True, auditor=True)

        assert service.has_roles(user, ["editor", "auditor"])
        assert not service.has_roles(user, ["editor", "admin"])
        assert service.has_roles(user, [])

    def test_has_any_role(self) -> None:
        service = _make_service(RoleStrategy.LOCAL)
        user = _make_user(editor=True)

        assert service.has_any_role(user, ["admin", "editor"])
        assert not service.has_any_role(user, ["admin"])
        assert service.has_any_role(user, None)

    def test_is_admin_uses_configured_role(self) -> None:
        provider = MagicMock()
        config = AuthConfig(roles=["user", "root"], admin_role="root")
        service = UserAuthorizationService(config=config, provider=provider)

        assert service.is_admin(_make_user(root=True))
        assert not service.is_admin(_make_user(admin=True))


class TestUpdateRoles:
    def test_local_leaves_roles_untouched(self) -> None:
        service = _make_service(RoleStrategy.LOCAL, {"admin"})
        user = _make_user(editor=True)

        service.update_roles(user)

        assert user.roles == {"editor": True}

    def test_external_replaces_roles(self) -> None:
        service = _make_service(RoleStrategy.EXTERNAL, {"auditor"})
        user = _make_user(editor=True)

        service.update_roles(user)

        assert user.roles == {"user": False, "editor": False, "auditor": True, "admin": False}

    def test_hybrid_preserves_local_grants(self) -> None:
        service = _make_service(RoleStrategy.HYBRID, {"auditor"})
        user = _make_user(editor=True)

        service.update_roles(user)

        assert user.local_roles == {"editor": True}
        assert user.roles == {"user": False, "editor": True, "auditor": True, "admin": False}


def test_admin_role_must_be_listed() -> None:
    with pytest.raises(ValidationError):
        AuthConfig(roles=["user"], admin_role="admin")
