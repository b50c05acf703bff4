"""Response DTOs and envelopes for API endpoints.

All payloads serialize with camelCase keys; successful responses are wrapped
in ``ApiResponse`` and failures in ``ErrorResponse``.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pokemon_catalog.entities import Page, PokemonEntity, PokemonStats

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PokemonResponse(CamelModel):
    """A stored pokemon as exposed over HTTP."""

    id: int = Field(..., description="Catalog id")
    external_id: int = Field(..., description="Id in PokeAPI")
    name: str
    height: int | None = None
    weight: int | None = None
    base_experience: int | None = None
    types: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    sprite_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, entity: PokemonEntity) -> "PokemonResponse":
        return cls(
            id=entity.id,
            external_id=entity.external_id,
            name=entity.name,
            height=entity.height,
            weight=entity.weight,
            base_experience=entity.base_experience,
            types=list(entity.types),
            abilities=list(entity.abilities),
            sprite_url=entity.sprite_url,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class PokemonPageResponse(CamelModel):
    """One page of pokemon."""

    content: list[PokemonResponse] = Field(default_factory=list)
    page_number: int = Field(..., ge=0)
    page_size: int = Field(..., ge=1)
    total_elements: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    @classmethod
    def from_page(cls, page: Page[PokemonEntity]) -> "PokemonPageResponse":
        return cls(
            content=[PokemonResponse.from_entity(p) for p in page.content],
            page_number=page.page_number,
            page_size=page.page_size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
        )


class PokemonStatsResponse(CamelModel):
    total_pokemon: int = Field(..., ge=0, description="Number of stored pokemon")

    @classmethod
    def from_stats(cls, stats: PokemonStats) -> "PokemonStatsResponse":
        return cls(total_pokemon=stats.total_pokemon)


class ExistsResponse(CamelModel):
    name: str
    exists: bool = Field(..., description="False also when PokeAPI could not be reached")


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    message: str
    data: T | None = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(CamelModel):
    """Failure envelope."""

    success: bool = False
    message: str
    error_code: str
    details: str | None = None
    field_errors: dict[str, str] | None = None
    path: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HealthCheckResponse(CamelModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the store is reachable")
    upstream_healthy: bool | None = Field(
        None,
        description="Whether PokeAPI is reachable",
    )
