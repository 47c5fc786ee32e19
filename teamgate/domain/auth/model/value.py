"""Value objects for the auth domain."""

from enum import StrEnum

from teamgate.domain.shared.model.value import Identifier


class UserId(Identifier):
    """Unique identifier for a User."""


class RoleStrategy(StrEnum):
    """Where a user's system roles come from."""

    LOCAL = "local"
    EXTERNAL = "external"
    HYBRID = "hybrid"
