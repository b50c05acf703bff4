"""PokeAPI-backed pokemon source.

Fetches single pokemon from ``{base_url}/{resource}/{name}`` and hands
back unsaved catalog entities. Successful fetches are cached in the
``pokemon`` tier; existence probes are cached in the ``pokemon_exists``
tier.

Failure translation:
- 404 from the upstream -> ExternalPokemonNotFoundError
- anything else (timeout, connection error, other status, bad payload)
  -> ExternalServiceError wrapping the cause
"""

from urllib.parse import quote

import httpx
import pydantic

from pokemon_catalog.cache import CacheTier
from pokemon_catalog.config import settings
from pokemon_catalog.dto.pokeapi import PokeApiPokemon
from pokemon_catalog.entities import PokemonEntity, normalize_name
from pokemon_catalog.exceptions import ExternalPokemonNotFoundError, ExternalServiceError
from pokemon_catalog.logging import get_logger
from pokemon_catalog.transform import to_entity

logger = get_logger(__name__)

_MISSING = object()


class PokeApiClient:
    """HTTP implementation of the PokemonSource protocol.

    This class satisfies the PokemonSource protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        tiers = CacheTiers.create()
        source = PokeApiClient.create(fetch_cache=tiers.pokemon, exists_cache=tiers.exists)

        pikachu = await source.fetch_by_name("pikachu")
        pikachu.external_id  # 25
        ```
    """

    def __init__(
        self,
        fetch_cache: CacheTier,
        exists_cache: CacheTier,
        resource_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the PokeAPI client.

        Args:
            fetch_cache: Tier holding fetched pokemon, keyed ``pokeapi_<name>``.
            exists_cache: Tier holding existence probe results, keyed by name.
            resource_url: Base URL of the pokemon resource. Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
            client: Preconfigured async client (tests inject a mock transport).
        """
        self._fetch_cache = fetch_cache
        self._exists_cache = exists_cache
        self._resource_url = (resource_url or settings.pokeapi_resource_url).rstrip("/")
        self._timeout = timeout or settings.pokeapi_timeout
        self._client = client

    @classmethod
    def create(
        cls,
        fetch_cache: CacheTier,
        exists_cache: CacheTier,
        resource_url: str | None = None,
    ) -> "PokeApiClient":
        """Factory method to create PokeApiClient with defaults from settings."""
        return cls(fetch_cache=fetch_cache, exists_cache=exists_cache, resource_url=resource_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                headers={"Accept": "application/json"},
            )
        return self._client

    def _url(self, name: str) -> str:
        return f"{self._resource_url}/{quote(name, safe='')}"

    @staticmethod
    def fetch_cache_key(name: str) -> str:
        return f"pokeapi_{normalize_name(name)}"

    async def fetch_by_name(self, name: str) -> PokemonEntity:
        """Fetch one pokemon and transform it into an unsaved entity.

        Args:
            name: Pokemon name (normalized again here for the cache key)

        Returns:
            PokemonEntity without store-assigned fields

        Raises:
            ExternalPokemonNotFoundError: If PokeAPI answers 404
            ExternalServiceError: On any other failure
        """
        name = normalize_name(name)
        key = self.fetch_cache_key(name)
        cached = self._fetch_cache.get(key, _MISSING)
        if cached is not _MISSING:
            logger.debug("pokeapi_cache_hit", name=name)
            return cached

        logger.info("pokeapi_fetch", name=name)
        try:
            response = await self.client.get(self._url(name))
            if response.status_code == httpx.codes.NOT_FOUND:
                logger.warning("pokeapi_not_found", name=name)
                raise ExternalPokemonNotFoundError(name)
            response.raise_for_status()
            payload = PokeApiPokemon.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error("pokeapi_bad_status", name=name, status=e.response.status_code)
            raise ExternalServiceError(
                f"PokeAPI answered {e.response.status_code} for '{name}'", cause=e
            ) from e
        except httpx.InvalidURL as e:
            logger.error("pokeapi_bad_name", name=name, error=str(e))
            raise ExternalServiceError(f"Cannot build a PokeAPI URL for '{name}'", cause=e) from e
        except httpx.HTTPError as e:
            logger.error("pokeapi_unreachable", name=name, error=str(e))
            raise ExternalServiceError(f"Could not reach PokeAPI for '{name}'", cause=e) from e
        except (ValueError, pydantic.ValidationError) as e:
            logger.error("pokeapi_bad_payload", name=name, error=str(e))
            raise ExternalServiceError(f"Malformed PokeAPI payload for '{name}'", cause=e) from e

        pokemon = to_entity(payload)
        self._fetch_cache.put(key, pokemon)
        logger.info("pokeapi_fetched", name=name, external_id=pokemon.external_id)
        return pokemon

    async def exists(self, name: str) -> bool:
        """Probe PokeAPI with HEAD.

        Never raises. A failed probe answers False and is not cached, so a
        False result is weak evidence of absence.
        """
        name = normalize_name(name)
        if not name:
            return False
        cached = self._exists_cache.get(name, _MISSING)
        if cached is not _MISSING:
            return cached

        try:
            response = await self.client.head(self._url(name))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("pokeapi_exists_probe_failed", name=name, error=str(e))
            return False

        if response.is_success:
            self._exists_cache.put(name, True)
            return True
        if response.status_code == httpx.codes.NOT_FOUND:
            self._exists_cache.put(name, False)
        else:
            logger.warning("pokeapi_exists_probe_failed", name=name, status=response.status_code)
        return False

    async def is_available(self) -> bool:
        """Check whether PokeAPI answers at all."""
        try:
            response = await self.client.head(self._resource_url)
        except httpx.HTTPError:
            return False
        return response.status_code < 500

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
