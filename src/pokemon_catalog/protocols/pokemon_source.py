"""Upstream pokemon source protocol.

Defines the interface for the read-only service the catalog mirrors from.
"""

from typing import Protocol, runtime_checkable

from pokemon_catalog.entities import PokemonEntity


@runtime_checkable
class PokemonSource(Protocol):
    """Protocol for the upstream pokemon source."""

    async def fetch_by_name(self, name: str) -> PokemonEntity:
        """Fetch one pokemon by its normalized name.

        Returns:
            An unsaved PokemonEntity

        Raises:
            ExternalPokemonNotFoundError: If the source has no such pokemon
            ExternalServiceError: On any other failure
        """
        ...

    async def exists(self, name: str) -> bool:
        """Probe for a pokemon. Never raises; failures read as False."""
        ...

    async def is_available(self) -> bool:
        ...
