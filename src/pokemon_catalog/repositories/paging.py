"""Client-side sorting and slicing shared by the store implementations."""

from collections.abc import Callable, Iterable

from pokemon_catalog.entities import Page, PageRequest, PokemonEntity
from pokemon_catalog.exceptions import ValidationError

SORT_FIELDS: dict[str, str] = {
    "id": "id",
    "external_id": "external_id",
    "externalId": "external_id",
    "name": "name",
    "height": "height",
    "weight": "weight",
    "base_experience": "base_experience",
    "baseExperience": "base_experience",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}


def sort_key(sort_field: str) -> Callable[[PokemonEntity], tuple]:
    """Key function for ``sort_field``; ``None`` sorts after any value."""
    attribute = SORT_FIELDS.get(sort_field)
    if attribute is None:
        raise ValidationError(
            f"Cannot sort by '{sort_field}'",
            field_errors={"sortBy": f"must be one of {sorted(set(SORT_FIELDS))}"},
        )

    def key(pokemon: PokemonEntity) -> tuple:
        value = getattr(pokemon, attribute)
        return (value is None, value if value is not None else 0, pokemon.id or 0)

    return key


def paginate(items: Iterable[PokemonEntity], page_request: PageRequest) -> Page[PokemonEntity]:
    """Sort ``items`` as requested and cut out the requested page."""
    ordered = sorted(
        items,
        key=sort_key(page_request.sort_field),
        reverse=page_request.descending,
    )
    start = page_request.offset
    return Page(
        content=tuple(ordered[start:start + page_request.size]),
        page_number=page_request.page,
        page_size=page_request.size,
        total_elements=len(ordered),
    )
