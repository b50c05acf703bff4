"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field, field_validator

NAME_PATTERN = r"^[a-zA-Z0-9-]+$"


class CreatePokemonRequest(BaseModel):
    """Request DTO for mirroring a pokemon from the upstream source."""

    name: str = Field(
        ...,
        description="Pokemon name to look up in PokeAPI",
        min_length=1,
        max_length=100,
        pattern=NAME_PATTERN,
        examples=["pikachu"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value
