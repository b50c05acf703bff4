"""Protocol interfaces for swappable implementations.

Protocols enable:
- Easy swapping of implementations (memory -> Redis, PokeAPI -> a mirror, etc.)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .pokemon_source import PokemonSource
from .pokemon_store import PokemonStore

__all__ = [
    "PokemonSource",
    "PokemonStore",
]
