"""HTTP handlers for pokemon operations.

Handlers convert between DTOs (API contracts) and service calls. Domain
errors are left to propagate; the app's exception handlers render them.
"""

from pokemon_catalog.dto import (
    ApiResponse,
    CreatePokemonRequest,
    ExistsResponse,
    HealthCheckResponse,
    PokemonPageResponse,
    PokemonResponse,
    PokemonStatsResponse,
)
from pokemon_catalog.entities import PageRequest
from pokemon_catalog.logging import get_logger
from pokemon_catalog.services import PokemonService

logger = get_logger(__name__)


class PokemonHandler:
    """HTTP handlers for the pokemon catalog.

    This handler delegates business logic to PokemonService and handles
    HTTP-specific concerns like:
    - Converting entities to DTOs
    - Wrapping payloads in the response envelope

    Example:
        ```python
        handler = PokemonHandler(pokemon_service=service)

        @app.post("/pokemon", status_code=201)
        async def create_pokemon(request: CreatePokemonRequest):
            return await handler.create_pokemon(request)
        ```
    """

    def __init__(self, pokemon_service: PokemonService) -> None:
        """Initialize the pokemon handler.

        Args:
            pokemon_service: The service for business logic (required).
        """
        self._pokemon = pokemon_service

    async def create_pokemon(self, request: CreatePokemonRequest) -> ApiResponse[PokemonResponse]:
        """Handle POST /pokemon requests."""
        pokemon = await self._pokemon.create_pokemon(request.name)
        return ApiResponse[PokemonResponse](
            message="Pokemon created successfully",
            data=PokemonResponse.from_entity(pokemon),
        )

    async def list_pokemon(
        self, page: int, size: int, sort_by: str, sort_dir: str
    ) -> ApiResponse[PokemonPageResponse]:
        """Handle GET /pokemon requests."""
        result = self._pokemon.list_pokemon(
            PageRequest(page=page, size=size, sort_field=sort_by, sort_direction=sort_dir)
        )
        logger.info("pokemon_listed", returned=result.number_of_elements, total=result.total_elements)
        return ApiResponse[PokemonPageResponse](
            message="Pokemon list retrieved successfully",
            data=PokemonPageResponse.from_page(result),
        )

    async def get_by_id(self, pokemon_id: int) -> ApiResponse[PokemonResponse]:
        """Handle GET /pokemon/{id} requests."""
        return ApiResponse[PokemonResponse](
            message="Pokemon found",
            data=PokemonResponse.from_entity(self._pokemon.get_by_id(pokemon_id)),
        )

    async def get_by_name(self, name: str) -> ApiResponse[PokemonResponse]:
        """Handle GET /pokemon/name/{name} requests."""
        return ApiResponse[PokemonResponse](
            message="Pokemon found",
            data=PokemonResponse.from_entity(self._pokemon.get_by_name(name)),
        )

    async def find_by_type(self, type_name: str, page: int, size: int) -> ApiResponse[PokemonPageResponse]:
        """Handle GET /pokemon/type/{type} requests."""
        result = self._pokemon.find_by_type(type_name, PageRequest(page=page, size=size))
        return ApiResponse[PokemonPageResponse](
            message="Pokemon by type retrieved successfully",
            data=PokemonPageResponse.from_page(result),
        )

    async def find_by_ability(self, ability: str, page: int, size: int) -> ApiResponse[PokemonPageResponse]:
        """Handle GET /pokemon/ability/{ability} requests."""
        result = self._pokemon.find_by_ability(ability, PageRequest(page=page, size=size))
        return ApiResponse[PokemonPageResponse](
            message="Pokemon by ability retrieved successfully",
            data=PokemonPageResponse.from_page(result),
        )

    async def search(self, query: str, page: int, size: int) -> ApiResponse[PokemonPageResponse]:
        """Handle GET /pokemon/search requests."""
        result = self._pokemon.search_by_name(query, PageRequest(page=page, size=size))
        return ApiResponse[PokemonPageResponse](
            message="Search completed successfully",
            data=PokemonPageResponse.from_page(result),
        )

    async def delete(self, pokemon_id: int) -> ApiResponse[None]:
        """Handle DELETE /pokemon/{id} requests."""
        self._pokemon.delete(pokemon_id)
        return ApiResponse[None](message="Pokemon deleted successfully")

    async def get_stats(self) -> ApiResponse[PokemonStatsResponse]:
        """Handle GET /pokemon/stats requests."""
        return ApiResponse[PokemonStatsResponse](
            message="Statistics retrieved successfully",
            data=PokemonStatsResponse.from_stats(self._pokemon.stats()),
        )

    async def exists_upstream(self, name: str) -> ApiResponse[ExistsResponse]:
        """Handle GET /pokemon/exists/{name} requests."""
        exists = await self._pokemon.exists_upstream(name)
        return ApiResponse[ExistsResponse](
            message="Existence probe completed",
            data=ExistsResponse(name=name.strip().lower(), exists=exists),
        )

    async def cache_stats(self) -> ApiResponse[dict]:
        """Handle GET /cache/stats requests."""
        return ApiResponse[dict](message="Cache statistics", data=self._pokemon.cache_stats())

    async def clear_cache(self) -> ApiResponse[None]:
        """Handle DELETE /cache requests."""
        self._pokemon.clear_caches()
        return ApiResponse[None](message="Cache cleared successfully")

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        health = await self._pokemon.is_healthy()
        return HealthCheckResponse(
            status="healthy" if health["store"] else "unhealthy",
            store_healthy=health["store"],
            upstream_healthy=health["upstream"],
        )
