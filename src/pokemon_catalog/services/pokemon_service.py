"""Pokemon catalog service.

This service orchestrates the store (durable records), the upstream source
(PokeAPI) and the cache tiers. It owns every cache invalidation rule: a
mutation is made durable first, then the tiers that could hold stale copies
are cleared.
"""

from pokemon_catalog.cache import CacheTiers
from pokemon_catalog.entities import Page, PageRequest, PokemonEntity, PokemonStats, normalize_name
from pokemon_catalog.exceptions import (
    ConflictError,
    ExternalPokemonNotFoundError,
    ExternalServiceError,
    PokemonAlreadyExistsError,
    PokemonNotFoundError,
)
from pokemon_catalog.logging import get_logger
from pokemon_catalog.protocols import PokemonSource, PokemonStore

logger = get_logger(__name__)

STATS_KEY = "stats"


class PokemonService:
    """Core catalog orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - PokemonStore: in-memory, Redis, a relational database, etc.
    - PokemonSource: PokeAPI or any mirror of it

    Example:
        ```python
        tiers = CacheTiers.create()
        service = PokemonService.create(
            repository=InMemoryPokemonRepository.create(),
            source=PokeApiClient.create(fetch_cache=tiers.pokemon, exists_cache=tiers.exists),
            caches=tiers,
        )
        pikachu = await service.create_pokemon("Pikachu")
        ```
    """

    def __init__(
        self,
        repository: PokemonStore,
        source: PokemonSource,
        caches: CacheTiers,
    ) -> None:
        """Initialize the pokemon service.

        Args:
            repository: Store that owns persisted pokemon (required).
            source: Upstream pokemon source (required).
            caches: Cache tiers shared with the source (required).
        """
        self._repository = repository
        self._source = source
        self._caches = caches

    @classmethod
    def create(
        cls,
        repository: PokemonStore,
        source: PokemonSource,
        caches: CacheTiers | None = None,
    ) -> "PokemonService":
        """Factory method; builds the standard tiers from settings when omitted."""
        return cls(repository=repository, source=source, caches=caches or CacheTiers.create())

    async def create_pokemon(self, name: str) -> PokemonEntity:
        """Mirror a pokemon from the upstream source into the store.

        Business logic:
        1. Normalize the name
        2. Refuse names already stored (before any upstream call)
        3. Fetch and transform the upstream pokemon
        4. Save and read back inside a store transaction
        5. Clear the list and search tiers

        Args:
            name: Pokemon name, any case, surrounding blanks ignored

        Returns:
            The stored pokemon

        Raises:
            PokemonAlreadyExistsError: If the name is stored already, or a
                concurrent create stored it first
            ExternalPokemonNotFoundError: If PokeAPI has no such pokemon
            ExternalServiceError: If PokeAPI could not be queried
        """
        name = normalize_name(name)
        logger.info("pokemon_create_started", name=name)

        if self._repository.exists_by_name(name):
            logger.warning("pokemon_create_duplicate", name=name)
            raise PokemonAlreadyExistsError(name)

        try:
            fetched = await self._source.fetch_by_name(name)
        except ExternalPokemonNotFoundError:
            logger.error("pokemon_missing_upstream", name=name)
            raise
        except ExternalServiceError as e:
            logger.error("pokemon_upstream_failed", name=name, error=e.message)
            raise

        try:
            with self._repository.transaction():
                saved = self._repository.save(fetched)
                stored = self._repository.find_by_id(saved.id)
                if stored is None:
                    raise RuntimeError(f"Pokemon {saved.id} vanished right after save")
        except ConflictError as e:
            logger.warning("pokemon_create_conflict", name=name, field=e.field)
            raise PokemonAlreadyExistsError(name) from e

        self._caches.invalidate_all(self._caches.lists.name, self._caches.search.name)
        logger.info("pokemon_created", name=name, pokemon_id=stored.id)
        return stored

    def get_by_id(self, pokemon_id: int) -> PokemonEntity:
        """Cache-first lookup by catalog id.

        Raises:
            PokemonNotFoundError: If no pokemon has this id
        """

        def load() -> PokemonEntity:
            pokemon = self._repository.find_by_id(pokemon_id)
            if pokemon is None:
                logger.warning("pokemon_not_found", pokemon_id=pokemon_id)
                raise PokemonNotFoundError(pokemon_id)
            return pokemon

        return self._caches.pokemon.get_or_load(f"id_{pokemon_id}", load)

    def get_by_name(self, name: str) -> PokemonEntity:
        """Cache-first lookup by name, ignoring case.

        Raises:
            PokemonNotFoundError: If no pokemon has this name
        """
        name = normalize_name(name)

        def load() -> PokemonEntity:
            pokemon = self._repository.find_by_name(name)
            if pokemon is None:
                logger.warning("pokemon_not_found", name=name)
                raise PokemonNotFoundError(name, by="name")
            return pokemon

        return self._caches.pokemon.get_or_load(f"name_{name}", load)

    def list_pokemon(self, page_request: PageRequest) -> Page[PokemonEntity]:
        """One sorted page of the whole catalog.

        Pages differing only in sort order are cached separately.
        """
        key = f"{page_request.page}_{page_request.size}_{page_request.sort_descriptor}"

        def load() -> Page[PokemonEntity]:
            page = self._repository.find_page(page_request)
            logger.info(
                "pokemon_page_loaded",
                page=page.page_number,
                size=page.number_of_elements,
                total=page.total_elements,
            )
            return page

        return self._caches.lists.get_or_load(key, load)

    def find_by_type(self, type_name: str, page_request: PageRequest) -> Page[PokemonEntity]:
        """Pokemon having ``type_name`` among their types, ignoring case."""
        type_name = normalize_name(type_name)
        key = f"type_{type_name}_{page_request.page}_{page_request.size}"
        return self._caches.search.get_or_load(
            key, lambda: self._repository.find_by_type(type_name, page_request)
        )

    def find_by_ability(self, ability: str, page_request: PageRequest) -> Page[PokemonEntity]:
        """Pokemon having ``ability`` among their abilities, ignoring case."""
        ability = normalize_name(ability)
        key = f"ability_{ability}_{page_request.page}_{page_request.size}"
        return self._caches.search.get_or_load(
            key, lambda: self._repository.find_by_ability(ability, page_request)
        )

    def search_by_name(self, text: str, page_request: PageRequest) -> Page[PokemonEntity]:
        """Pokemon whose name contains ``text``, ignoring case."""
        text = normalize_name(text)
        key = f"search_{text}_{page_request.page}_{page_request.size}"
        return self._caches.search.get_or_load(
            key, lambda: self._repository.find_by_name_containing(text, page_request)
        )

    def delete(self, pokemon_id: int) -> None:
        """Delete a pokemon and clear every tier that may hold it.

        Raises:
            PokemonNotFoundError: If no pokemon has this id
        """
        logger.info("pokemon_delete_started", pokemon_id=pokemon_id)

        if not self._repository.exists_by_id(pokemon_id):
            logger.warning("pokemon_delete_missing", pokemon_id=pokemon_id)
            raise PokemonNotFoundError(pokemon_id)

        self._repository.delete_by_id(pokemon_id)
        self._caches.invalidate_all(
            self._caches.pokemon.name,
            self._caches.lists.name,
            self._caches.search.name,
        )
        logger.info("pokemon_deleted", pokemon_id=pokemon_id)

    def stats(self) -> PokemonStats:
        """Catalog totals.

        Cached for the stats tier TTL and never invalidated by writes, so the
        count may lag mutations by up to one TTL period.
        """
        return self._caches.stats_tier.get_or_load(
            STATS_KEY, lambda: PokemonStats(total_pokemon=self._repository.count())
        )

    async def exists_upstream(self, name: str) -> bool:
        """Weak existence probe against PokeAPI; False may mean unreachable."""
        name = normalize_name(name)
        if not name:
            return False
        return await self._source.exists(name)

    def clear_caches(self) -> None:
        self._caches.invalidate_all()
        logger.info("caches_cleared")

    def cache_stats(self) -> dict:
        return self._caches.stats()

    async def is_healthy(self) -> dict[str, bool]:
        """Reachability of the store and of PokeAPI."""
        return {
            "store": self._repository.health_check(),
            "upstream": await self._source.is_available(),
        }

    @property
    def repository(self) -> PokemonStore:
        """Get the underlying repository (for testing)."""
        return self._repository

    @property
    def source(self) -> PokemonSource:
        """Get the underlying source (for testing)."""
        return self._source

    @property
    def caches(self) -> CacheTiers:
        return self._caches
