"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository / Source
    (HTTP)  -> (Business) -> (Data Access)
"""

from .pokemon_handler import PokemonHandler

__all__ = [
    "PokemonHandler",
]
