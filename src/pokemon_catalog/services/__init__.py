"""Service layer for business logic.

This layer contains the catalog orchestration. Services depend on
protocols (interfaces), not concrete implementations, making them testable
and flexible.

Architecture:
    Handler -> Service -> Repository / Source
    (HTTP)  -> (Business) -> (Data Access)
"""

from .pokemon_service import PokemonService

__all__ = [
    "PokemonService",
]
