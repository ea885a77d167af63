"""Immutable pydantic bases for domain values and entities."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, RootModel, field_validator


class DomainModel(BaseModel):
    """Immutable model compared by its field values.

    Used for both value objects and entities. Entities are replaced with
    ``model_copy(update=...)`` rather than mutated.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="after")
    @classmethod
    def assume_utc(cls, value):
        """Treat naive timestamps as UTC so all of them stay comparable."""
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class StringValue(RootModel[str]):
    """Immutable wrapper around a single string, dumped as the bare string."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.root
