from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """Mutable domain object with identity. Assignments are re-validated."""

    model_config = ConfigDict(validate_assignment=True)


class Aggregate(Entity):
    """Consistency boundary; repositories load and save whole aggregates."""
