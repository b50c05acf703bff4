"""Pokemon Catalog - a local, cached mirror of PokeAPI pokemon.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (PokemonStore, PokemonSource)
    - repositories: Store backends and the PokeAPI client
    - services: Orchestration of store, upstream and cache tiers
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts, PokeAPI wire shape)
    - entities: Domain models (internal)

Usage:
    ```python
    from pokemon_catalog.cache import CacheTiers
    from pokemon_catalog.repositories import InMemoryPokemonRepository, PokeApiClient
    from pokemon_catalog.services import PokemonService

    tiers = CacheTiers.create()
    service = PokemonService.create(
        repository=InMemoryPokemonRepository.create(),
        source=PokeApiClient.create(fetch_cache=tiers.pokemon, exists_cache=tiers.exists),
        caches=tiers,
    )
    ```

For HTTP API:
    ```python
    from pokemon_catalog.api.app import app
    ```
"""

from pokemon_catalog.cache import CacheTier, CacheTiers
from pokemon_catalog.config import get_redis_client, settings
from pokemon_catalog.dto import CreatePokemonRequest, PokemonResponse
from pokemon_catalog.entities import Page, PageRequest, PokemonEntity, PokemonStats
from pokemon_catalog.handlers import PokemonHandler
from pokemon_catalog.protocols import PokemonSource, PokemonStore
from pokemon_catalog.repositories import (
    InMemoryPokemonRepository,
    PokeApiClient,
    RedisPokemonRepository,
)
from pokemon_catalog.services import PokemonService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "PokemonStore",
    "PokemonSource",
    # Services (business logic)
    "PokemonService",
    # Handlers (HTTP)
    "PokemonHandler",
    # Repositories (data access)
    "InMemoryPokemonRepository",
    "RedisPokemonRepository",
    "PokeApiClient",
    # Cache
    "CacheTier",
    "CacheTiers",
    # Entities (domain models)
    "PokemonEntity",
    "PokemonStats",
    "Page",
    "PageRequest",
    # DTOs (API contracts)
    "CreatePokemonRequest",
    "PokemonResponse",
]
