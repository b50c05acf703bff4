"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from pokemon_catalog.cache import CacheTiers
from pokemon_catalog.config import Settings, settings
from pokemon_catalog.handlers import PokemonHandler
from pokemon_catalog.logging import configure_logging, get_logger
from pokemon_catalog.protocols import PokemonStore
from pokemon_catalog.repositories import (
    InMemoryPokemonRepository,
    PokeApiClient,
    RedisPokemonRepository,
)
from pokemon_catalog.services import PokemonService

logger = get_logger(__name__)


def get_pokemon_service(request: Request) -> PokemonService:
    """Dependency injection for PokemonService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "pokemon_service", None)
    if service is None:
        raise RuntimeError("PokemonService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> PokemonHandler:
    """Dependency injection for PokemonHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "pokemon_handler", None)
    if handler is None:
        raise RuntimeError("PokemonHandler not initialized. Check lifespan setup.")
    return handler


def build_store(config: Settings) -> PokemonStore:
    """Pick the store backend named by ``STORE_BACKEND``."""
    if config.store_backend == "redis":
        return RedisPokemonRepository.create(key_prefix=config.redis_key_prefix)
    return InMemoryPokemonRepository.create()


def install(app: FastAPI, service: PokemonService) -> None:
    """Store a ready service and its handler in app.state."""
    app.state.pokemon_service = service
    app.state.pokemon_handler = PokemonHandler(pokemon_service=service)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Cache tiers - one per cached concern
    2. Store and PokeAPI client - data access
    3. Service (business logic) - app.state.pokemon_service
    4. Handler (HTTP endpoints) - app.state.pokemon_handler

    A service installed before startup (tests) is left as is.
    """
    configure_logging("pokemon-catalog", settings.log_level, settings.log_json)

    owned = getattr(app.state, "pokemon_service", None) is None
    if owned:
        caches = CacheTiers.create(settings)
        source = PokeApiClient.create(fetch_cache=caches.pokemon, exists_cache=caches.exists)
        repository = build_store(settings)
        install(app, PokemonService.create(repository=repository, source=source, caches=caches))
        logger.info(
            "pokemon_service_initialized",
            store=settings.store_backend,
            upstream=settings.pokeapi_resource_url,
        )

    yield

    if owned:
        await source.close()
        del app.state.pokemon_handler
        del app.state.pokemon_service
        logger.info("pokemon_service_shut_down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[PokemonHandler, Depends(get_handler)]
ServiceDep = Annotated[PokemonService, Depends(get_pokemon_service)]
