from dishka import Provider, provide

from teamgate.config import Config
from teamgate.domain.auth.port.external_role_map import ExternalRoleMapProvider
from teamgate.infrastructure.auth.external_role_map import create_external_role_map_provider
from teamgate.util.di.scope import Scope


class AuthInfraProvider(Provider):
    @provide(scope=Scope.APP)
    def get_external_role_map_provider(self, config: Config) -> ExternalRoleMapProvider:
        return create_external_role_map_provider(config.auth.external_roles)
