"""Wire models for the upstream PokeAPI ``/pokemon/{name}`` payload.

Only the fields the catalog mirrors are declared; everything else in the
(large) upstream document is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NamedResource(_Wire):
    name: str
    url: str | None = None


class TypeSlot(_Wire):
    slot: int | None = None
    type: NamedResource | None = None


class AbilitySlot(_Wire):
    slot: int | None = None
    is_hidden: bool | None = None
    ability: NamedResource | None = None


class Sprites(_Wire):
    front_default: str | None = None
    front_shiny: str | None = None
    back_default: str | None = None
    back_shiny: str | None = None


class PokeApiPokemon(_Wire):
    """Subset of the upstream pokemon document."""

    id: int
    name: str
    height: int | None = None
    weight: int | None = None
    base_experience: int | None = None
    types: list[TypeSlot] | None = Field(default=None)
    abilities: list[AbilitySlot] | None = Field(default=None)
    sprites: Sprites | None = None
