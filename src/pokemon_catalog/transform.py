"""Mapping from the upstream wire shape to the catalog entity."""

from typing import Any

from pokemon_catalog.dto.pokeapi import AbilitySlot, PokeApiPokemon, TypeSlot
from pokemon_catalog.entities import PokemonEntity, normalize_name


def type_names(slots: list[TypeSlot] | None) -> tuple[str, ...]:
    """Type names in slot order; slots without a type are skipped."""
    return tuple(s.type.name for s in slots or () if s.type is not None)


def ability_names(slots: list[AbilitySlot] | None) -> tuple[str, ...]:
    """Ability names in slot order; the hidden flag is dropped."""
    return tuple(s.ability.name for s in slots or () if s.ability is not None)


def to_entity(payload: PokeApiPokemon | dict[str, Any]) -> PokemonEntity:
    """Build an unsaved ``PokemonEntity`` from an upstream pokemon document.

    Store-assigned fields (id, timestamps, version) are left unset.
    """
    if not isinstance(payload, PokeApiPokemon):
        payload = PokeApiPokemon.model_validate(payload)

    return PokemonEntity(
        external_id=payload.id,
        name=normalize_name(payload.name),
        height=payload.height,
        weight=payload.weight,
        base_experience=payload.base_experience,
        types=type_names(payload.types),
        abilities=ability_names(payload.abilities),
        sprite_url=payload.sprites.front_default if payload.sprites else None,
    )
