from .team import SQLAlchemyTeamRepository
from .user import SQLAlchemyUserRepository

__all__ = ["SQLAlchemyTeamRepository", "SQLAlchemyUserRepository"]
