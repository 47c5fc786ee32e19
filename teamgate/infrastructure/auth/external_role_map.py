"""External role map providers and the registry that selects one from config."""

from collections.abc import Callable

from teamgate.config import ExternalRoleMapProviderKind, ExternalRolesConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.port.external_role_map import ExternalRoleMapProvider
from teamgate.domain.shared.error import ConfigurationError


class DefaultExternalRoleMapProvider(ExternalRoleMapProvider):
    """Grants a system role when the user carries the external role mapped to it."""

    def __init__(self, config: ExternalRolesConfig) -> None:
        self.role_map = dict(config.role_map)

    def has_role(self, user: User, role: str) -> bool:
        external_role = self.role_map.get(role)
        return external_role is not None and external_role in user.external_roles


ProviderFactory = Callable[[ExternalRolesConfig], ExternalRoleMapProvider]

PROVIDERS: dict[ExternalRoleMapProviderKind, ProviderFactory] = {
    ExternalRoleMapProviderKind.DEFAULT: DefaultExternalRoleMapProvider,
}


def create_external_role_map_provider(
    config: ExternalRolesConfig,
    registry: dict[ExternalRoleMapProviderKind, ProviderFactory] = PROVIDERS,
) -> ExternalRoleMapProvider:
    """Build the provider configured in ``config.provider``."""
    factory = registry.get(config.provider)
    if factory is None:
        raise ConfigurationError(f"Unknown external role map provider: {config.provider}")
    return factory(config)
