"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract and the upstream
wire shape. Internal domain logic should use entities from the entities
package.
"""

from .pokeapi import AbilitySlot, NamedResource, PokeApiPokemon, Sprites, TypeSlot
from .requests import CreatePokemonRequest
from .responses import (
    ApiResponse,
    ErrorResponse,
    ExistsResponse,
    HealthCheckResponse,
    PokemonPageResponse,
    PokemonResponse,
    PokemonStatsResponse,
)

__all__ = [
    "PokeApiPokemon",
    "TypeSlot",
    "AbilitySlot",
    "NamedResource",
    "Sprites",
    "CreatePokemonRequest",
    "ApiResponse",
    "ErrorResponse",
    "ExistsResponse",
    "HealthCheckResponse",
    "PokemonPageResponse",
    "PokemonResponse",
    "PokemonStatsResponse",
]
