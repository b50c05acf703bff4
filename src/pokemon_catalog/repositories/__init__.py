"""Repository layer for data access.

This layer hides external dependencies (the store backend and the upstream
PokeAPI) behind protocol-based interfaces. The repositories are protocol
based (structural typing), not inheritance based.
"""

from pokemon_catalog.protocols import PokemonSource, PokemonStore

from .memory_repository import InMemoryPokemonRepository
from .pokeapi_client import PokeApiClient
from .redis_repository import RedisPokemonRepository

__all__ = [
    "PokemonStore",
    "PokemonSource",
    "InMemoryPokemonRepository",
    "RedisPokemonRepository",
    "PokeApiClient",
]
