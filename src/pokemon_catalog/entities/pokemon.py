"""Pokemon domain entity."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PokemonEntity:
    """A pokemon mirrored from the upstream source.

    ``id``, ``created_at``, ``updated_at`` and ``version`` are assigned by the
    store; an entity fresh from the upstream has them unset.

    Attributes:
        external_id: The pokemon's id in the upstream source
        name: Canonical (lowercase, trimmed) name
        height: Height in decimetres
        weight: Weight in hectograms
        base_experience: Base experience yield
        types: Type names in upstream slot order
        abilities: Ability names in upstream slot order
        sprite_url: Front default sprite URL
    """

    external_id: int
    name: str
    height: int | None = None
    weight: int | None = None
    base_experience: int | None = None
    types: tuple[str, ...] = field(default_factory=tuple)
    abilities: tuple[str, ...] = field(default_factory=tuple)
    sprite_url: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def has_type(self, type_name: str) -> bool:
        wanted = type_name.strip().lower()
        return any(t.lower() == wanted for t in self.types)

    def has_ability(self, ability: str) -> bool:
        wanted = ability.strip().lower()
        return any(a.lower() == wanted for a in self.abilities)


@dataclass(frozen=True)
class PokemonStats:
    """Aggregate numbers over the stored catalog."""

    total_pokemon: int


def normalize_name(name: str) -> str:
    """Canonical form used for storage, comparison and cache keys."""
    return name.strip().lower()
