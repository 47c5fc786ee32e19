import logging
import os
import sys
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing_extensions import Self

from teamgate.domain.auth.model.value import RoleStrategy


# =============================================================================
# Teams Configuration
# =============================================================================


class ImplicitMemberStrategy(StrEnum):
    """How implicit team membership is derived from external identity attributes."""

    NONE = "none"
    ROLES = "roles"  # all of team.requires_external_roles present on the user
    TEAMS = "teams"  # any of team.requires_external_teams present on the user


class ImplicitMembersConfig(BaseModel):
    """Implicit membership settings (nested in TeamsConfig)."""

    strategy: ImplicitMemberStrategy = ImplicitMemberStrategy.NONE


class TeamsConfig(BaseModel):
    """Team resolution settings, handed to each team service at construction."""

    nested_teams: bool = False  # Membership in a team grants membership in its descendants
    implicit_members: ImplicitMembersConfig = ImplicitMembersConfig()

    @property
    def implicit_strategy(self) -> ImplicitMemberStrategy:
        return self.implicit_members.strategy


# =============================================================================
# Authorization Configuration
# =============================================================================


class ExternalRoleMapProviderKind(StrEnum):
    """Registered external role map providers."""

    DEFAULT = "default"


class ExternalRolesConfig(BaseModel):
    """Mapping of system roles onto external (SSO) role identifiers."""

    provider: ExternalRoleMapProviderKind = ExternalRoleMapProviderKind.DEFAULT
    role_map: dict[str, str] = {}  # system role -> external role


class AuthConfig(BaseModel):
    """System role settings."""

    role_strategy: RoleStrategy = RoleStrategy.LOCAL
    roles: list[str] = ["user", "editor", "auditor", "admin"]
    admin_role: str = "admin"  # Holders bypass team role checks
    external_roles: ExternalRolesConfig = ExternalRolesConfig()

    @model_validator(mode="after")
    def check_roles(self) -> Self:
        """The admin role must be a known system role."""
        if self.admin_role not in self.roles:
            raise ValueError(f"Role {self.admin_role!r} is not listed in auth.roles")
        return self


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by TEAMGATE_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("TEAMGATE_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class DatabaseConfig(BaseModel):
    """Database configuration (nested in Config, uses env_nested_delimiter)."""

    url: str = "sqlite+aiosqlite:///./teamgate.db"
    echo: bool = False
    # SQLite only: how each transaction starts; None keeps the driver default
    sqlite_begin_mode: Literal["DEFERRED", "IMMEDIATE", "EXCLUSIVE"] | None = "IMMEDIATE"
    sqlite_busy_timeout_ms: int = 5000


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


class Config(BaseSettings):
    # These are BaseModel, so env_nested_delimiter handles their env vars
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    teams: TeamsConfig = TeamsConfig()
    auth: AuthConfig = AuthConfig()

    model_config = {
        "env_prefix": "TEAMGATE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows TEAMGATE_TEAMS__NESTED_TEAMS=true
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - TEAMGATE_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so every module logger
    picks up the root handler.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(config.level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s", config.level)
