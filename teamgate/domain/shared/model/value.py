from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, RootModel

from teamgate.domain.shared.error import InvalidInputError


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class Identifier(RootModel[UUID]):
    """UUID-backed identifier. Subclass per entity so ids of different kinds never mix."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def generate(cls):
        return cls(uuid4())

    @classmethod
    def parse(cls, value: "str | UUID | Identifier"):
        """Build an identifier from API input. Raises InvalidInputError if malformed."""
        if isinstance(value, cls):
            return value
        if isinstance(value, UUID):
            return cls(value)
        try:
            return cls(UUID(str(value)))
        except (TypeError, ValueError) as e:
            raise InvalidInputError(
                f"Invalid {cls.__name__}: {value!r}", code="invalid_id"
            ) from e

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)
