"""Tests for configuration loading."""

import logging

import pytest
from pydantic import ValidationError

from teamgate.config import (
    Config,
    ImplicitMemberStrategy,
    LoggingConfig,
    TeamsConfig,
    configure_logging,
)
from teamgate.domain.auth.model.value import RoleStrategy


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ("TEAMGATE_CONFIG_FILE", "TEAMGATE_TEAMS__NESTED_TEAMS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    config = Config()

    assert config.teams.nested_teams is False
    assert config.teams.implicit_strategy == ImplicitMemberStrategy.NONE
    assert config.auth.role_strategy == RoleStrategy.LOCAL
    assert config.database.url.startswith("sqlite+aiosqlite://")
    assert config.database.sqlite_begin_mode == "IMMEDIATE"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEAMGATE_TEAMS__NESTED_TEAMS", "true")
    monkeypatch.setenv("TEAMGATE_AUTH__ROLE_STRATEGY", "hybrid")

    config = Config()

    assert config.teams.nested_teams is True
    assert config.auth.role_strategy == RoleStrategy.HYBRID


def test_yaml_file(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    path = tmp_path / "teamgate.yaml"
    path.write_text(
        "teams:\n"
        "  nested_teams: true\n"
        "  implicit_members:\n"
        "    strategy: teams\n"
        "auth:\n"
        "  external_roles:\n"
        "    role_map:\n"
        "      admin: sso-admins\n"
    )
    monkeypatch.setenv("TEAMGATE_CONFIG_FILE", str(path))

    config = Config()

    assert config.teams.implicit_strategy == ImplicitMemberStrategy.TEAMS
    assert config.auth.external_roles.role_map == {"admin": "sso-admins"}


def test_env_beats_yaml(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    path = tmp_path / "teamgate.yaml"
    path.write_text("teams:\n  nested_teams: false\n")
    monkeypatch.setenv("TEAMGATE_CONFIG_FILE", str(path))
    monkeypatch.setenv("TEAMGATE_TEAMS__NESTED_TEAMS", "true")

    assert Config().teams.nested_teams is True


def test_unknown_strategy_is_rejected() -> None:
    with pytest.raises(ValidationError):
        TeamsConfig.model_validate({"implicit_members": {"strategy": "groups"}})


def test_configure_logging() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(LoggingConfig(level="DEBUG"))

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger("aiosqlite").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
