"""Domain entities for internal representation.

These are frozen dataclasses used by services and repositories. They are
NOT used for API contracts - use DTOs from the dto package for that.
"""

from .page import ASC, DESC, Page, PageRequest, parse_direction
from .pokemon import PokemonEntity, PokemonStats, normalize_name

__all__ = [
    "ASC",
    "DESC",
    "Page",
    "PageRequest",
    "PokemonEntity",
    "PokemonStats",
    "normalize_name",
    "parse_direction",
]
