"""
Tests for mapping PokeAPI payloads to entities.
"""

from pokemon_catalog.dto import PokeApiPokemon
from pokemon_catalog.transform import ability_names, to_entity, type_names

from conftest import BULBASAUR, PIKACHU


def test_pikachu_payload_maps_to_entity():
    pokemon = to_entity(PIKACHU)

    assert pokemon.external_id == 25
    assert pokemon.name == "pikachu"
    assert (pokemon.height, pokemon.weight, pokemon.base_experience) == (4, 60, 112)
    assert pokemon.types == ("electric",)
    assert pokemon.abilities == ("static", "lightning-rod")
    assert pokemon.sprite_url == "sprite-url"


def test_store_assigned_fields_are_left_unset():
    pokemon = to_entity(PIKACHU)

    assert pokemon.id is None
    assert pokemon.created_at is None
    assert pokemon.updated_at is None
    assert pokemon.version is None
    assert not pokemon.is_persisted


def test_slot_order_is_preserved():
    assert to_entity(BULBASAUR).types == ("grass", "poison")


def test_missing_nested_structures_become_empty():
    pokemon = to_entity({"id": 132, "name": "Ditto"})

    assert pokemon.types == ()
    assert pokemon.abilities == ()
    assert pokemon.sprite_url is None
    assert pokemon.name == "ditto"


def test_slots_without_inner_resource_are_skipped():
    payload = PokeApiPokemon.model_validate(
        {
            "id": 1,
            "name": "x",
            "types": [{"slot": 1}, {"slot": 2, "type": {"name": "fire"}}],
            "abilities": [{"slot": 1, "ability": None}],
        }
    )

    assert type_names(payload.types) == ("fire",)
    assert ability_names(payload.abilities) == ()


def test_unknown_fields_are_ignored():
    payload = dict(PIKACHU, moves=[{"move": {"name": "thunder"}}], stats=[])
    assert to_entity(payload) == to_entity(PIKACHU)
