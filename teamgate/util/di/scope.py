"""Custom Dishka scopes for teamgate."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (configuration, engine, stateless resolvers)
    - UOW: Unit of Work (one request: one session, one transaction)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
