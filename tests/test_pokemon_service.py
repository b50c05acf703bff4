"""
Tests for the catalog orchestration service.
"""

import asyncio
from unittest.mock import patch

import httpx
import pytest

from pokemon_catalog.entities import PageRequest
from pokemon_catalog.exceptions import (
    ConflictError,
    ExternalPokemonNotFoundError,
    ExternalServiceError,
    NotFoundError,
    PokemonAlreadyExistsError,
    PokemonNotFoundError,
)
from pokemon_catalog.transform import to_entity

from conftest import BULBASAUR, PIKACHU, RAICHU


async def test_create_mirrors_upstream_pokemon(service):
    pokemon = await service.create_pokemon("pikachu")

    assert pokemon.id is not None
    assert pokemon.external_id == 25
    assert pokemon.types == ("electric",)
    assert pokemon.abilities == ("static", "lightning-rod")
    assert pokemon.sprite_url == "sprite-url"
    assert pokemon.version == 0


@pytest.mark.parametrize("raw", ["pikachu", "PIKACHU", "  Pikachu  "])
async def test_create_then_get_by_name_returns_normalized_name(service, raw):
    await service.create_pokemon(raw)

    assert service.get_by_name(raw).name == "pikachu"


async def test_create_existing_name_fails_without_upstream_call(service, pokeapi):
    await service.create_pokemon("pikachu")
    calls_before = len(pokeapi.calls)

    with pytest.raises(PokemonAlreadyExistsError):
        await service.create_pokemon("PiKaChU")

    assert len(pokeapi.calls) == calls_before


async def test_create_unknown_upstream_name_persists_nothing(service, repository):
    with pytest.raises(ExternalPokemonNotFoundError) as exc_info:
        await service.create_pokemon("missingno")

    assert isinstance(exc_info.value, NotFoundError)
    assert repository.count() == 0


async def test_create_upstream_failure_persists_nothing(service, repository, pokeapi):
    pokeapi.status_override = 500

    with pytest.raises(ExternalServiceError):
        await service.create_pokemon("pikachu")

    assert repository.count() == 0


async def test_create_store_conflict_becomes_already_exists(service, repository):
    with patch.object(repository, "save", side_effect=ConflictError("duplicate", field="name")):
        with pytest.raises(PokemonAlreadyExistsError) as exc_info:
            await service.create_pokemon("pikachu")

    assert isinstance(exc_info.value.__cause__, ConflictError)


async def test_failed_read_back_rolls_back_save(service, repository):
    with patch.object(repository, "find_by_id", return_value=None):
        with pytest.raises(RuntimeError):
            await service.create_pokemon("pikachu")

    assert repository.count() == 0


async def test_create_does_not_touch_caches_when_persistence_fails(service, repository, caches):
    caches.lists.put("0_10_id: ASC", "cached page")

    with patch.object(repository, "save", side_effect=ConflictError("duplicate")):
        with pytest.raises(PokemonAlreadyExistsError):
            await service.create_pokemon("pikachu")

    assert caches.lists.get("0_10_id: ASC") == "cached page"


async def test_create_clears_list_and_search_tiers_only(service, caches):
    caches.lists.put("page", 1)
    caches.search.put("type", 2)
    caches.pokemon.put("id_99", 3)

    await service.create_pokemon("pikachu")

    assert len(caches.lists) == 0
    assert len(caches.search) == 0
    assert caches.pokemon.get("id_99") == 3


async def test_concurrent_creates_of_same_name_store_exactly_one(service, repository):
    results = await asyncio.gather(
        *(service.create_pokemon("pikachu") for _ in range(5)),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert all(isinstance(f, PokemonAlreadyExistsError) for f in failures)
    assert repository.count() == 1


async def test_get_by_id_hits_cache_on_repeat(service, repository):
    created = await service.create_pokemon("pikachu")

    with patch.object(repository, "find_by_id", wraps=repository.find_by_id) as find_by_id:
        for _ in range(5):
            assert service.get_by_id(created.id).name == "pikachu"

    assert find_by_id.call_count == 1


async def test_get_by_id_reloads_after_ttl(service, repository, clock):
    created = await service.create_pokemon("pikachu")

    with patch.object(repository, "find_by_id", wraps=repository.find_by_id) as find_by_id:
        service.get_by_id(created.id)
        clock.advance(30 * 60)
        service.get_by_id(created.id)

    assert find_by_id.call_count == 2


def test_get_by_id_missing_mentions_the_id(service):
    with pytest.raises(PokemonNotFoundError) as exc_info:
        service.get_by_id(42)

    assert "42" in exc_info.value.message
    assert exc_info.value.error_code == "POKEMON_NOT_FOUND"


def test_get_by_name_missing_mentions_the_name(service):
    with pytest.raises(PokemonNotFoundError) as exc_info:
        service.get_by_name("Mew")

    assert "'mew'" in exc_info.value.message


def test_miss_is_not_cached_as_absence(service, repository, caches):
    with pytest.raises(PokemonNotFoundError):
        service.get_by_name("pikachu")

    repository.save(to_entity(PIKACHU))

    assert service.get_by_name("pikachu").external_id == 25


async def test_get_by_name_cache_is_case_insensitive(service, repository):
    await service.create_pokemon("pikachu")

    with patch.object(repository, "find_by_name", wraps=repository.find_by_name) as find_by_name:
        service.get_by_name("pikachu")
        service.get_by_name("PIKACHU")

    assert find_by_name.call_count == 1


async def test_delete_then_get_fails_and_list_forgets_it(service):
    created = await service.create_pokemon("pikachu")
    await service.create_pokemon("bulbasaur")
    before = service.list_pokemon(PageRequest(page=0, size=10))
    assert created.id in [p.id for p in before.content]
    service.get_by_id(created.id)

    service.delete(created.id)

    with pytest.raises(PokemonNotFoundError):
        service.get_by_id(created.id)
    after = service.list_pokemon(PageRequest(page=0, size=10))
    assert created.id not in [p.id for p in after.content]


async def test_delete_clears_search_results(service):
    created = await service.create_pokemon("pikachu")
    assert service.search_by_name("pika", PageRequest()).total_elements == 1

    service.delete(created.id)

    assert service.search_by_name("pika", PageRequest()).total_elements == 0


def test_delete_missing_id_fails(service):
    with pytest.raises(PokemonNotFoundError):
        service.delete(7)


async def test_list_caches_sort_orders_separately(service, repository):
    for name in ("pikachu", "bulbasaur", "raichu"):
        await service.create_pokemon(name)

    with patch.object(repository, "find_page", wraps=repository.find_page) as find_page:
        asc = service.list_pokemon(PageRequest(0, 10, "name", "asc"))
        desc = service.list_pokemon(PageRequest(0, 10, "name", "desc"))
        asc_again = service.list_pokemon(PageRequest(0, 10, "name", "ASC"))
        desc_again = service.list_pokemon(PageRequest(0, 10, "name", "Desc"))

    assert [p.name for p in asc.content] == ["bulbasaur", "pikachu", "raichu"]
    assert [p.name for p in desc.content] == ["raichu", "pikachu", "bulbasaur"]
    assert asc_again is asc
    assert desc_again is desc
    assert find_page.call_count == 2


async def test_unknown_sort_direction_defaults_to_ascending(service):
    for name in ("pikachu", "bulbasaur"):
        await service.create_pokemon(name)

    page = service.list_pokemon(PageRequest(0, 10, "name", "sideways"))

    assert [p.name for p in page.content] == ["bulbasaur", "pikachu"]


async def test_list_cache_expires_after_ten_minutes(service, repository, clock):
    await service.create_pokemon("pikachu")

    with patch.object(repository, "find_page", wraps=repository.find_page) as find_page:
        service.list_pokemon(PageRequest())
        clock.advance(10 * 60 - 1)
        service.list_pokemon(PageRequest())
        clock.advance(1)
        service.list_pokemon(PageRequest())

    assert find_page.call_count == 2


async def test_find_by_type_returns_pikachu(service):
    await service.create_pokemon("pikachu")

    page = service.find_by_type("electric", PageRequest(page=0, size=10))

    assert [p.name for p in page.content] == ["pikachu"]
    assert page.total_elements == 1


async def test_find_by_type_key_is_case_insensitive(service, repository):
    await service.create_pokemon("pikachu")

    with patch.object(repository, "find_by_type", wraps=repository.find_by_type) as find_by_type:
        service.find_by_type("Electric", PageRequest())
        service.find_by_type("ELECTRIC", PageRequest())

    assert find_by_type.call_count == 1


async def test_search_cache_expires_after_five_minutes(service, repository, clock):
    await service.create_pokemon("pikachu")

    with patch.object(
        repository, "find_by_name_containing", wraps=repository.find_by_name_containing
    ) as search:
        service.search_by_name("chu", PageRequest())
        clock.advance(5 * 60)
        service.search_by_name("chu", PageRequest())

    assert search.call_count == 2


async def test_create_makes_new_pokemon_visible_in_cached_searches(service):
    await service.create_pokemon("pikachu")
    assert service.find_by_type("electric", PageRequest()).total_elements == 1

    await service.create_pokemon("raichu")

    assert service.find_by_type("electric", PageRequest()).total_elements == 2


async def test_find_by_ability(service):
    await service.create_pokemon("pikachu")
    await service.create_pokemon("raichu")
    await service.create_pokemon("bulbasaur")

    page = service.find_by_ability("static", PageRequest())

    assert [p.name for p in page.content] == ["pikachu", "raichu"]


async def test_stats_reflect_count_and_lag_by_one_ttl(service, clock):
    await service.create_pokemon("pikachu")
    assert service.stats().total_pokemon == 1

    await service.create_pokemon("bulbasaur")
    assert service.stats().total_pokemon == 1

    clock.advance(2 * 60)
    assert service.stats().total_pokemon == 2


async def test_exists_upstream_is_weak(service, pokeapi):
    assert await service.exists_upstream(" Pikachu") is True

    pokeapi.failure = httpx.ConnectError("refused")
    assert await service.exists_upstream("bulbasaur") is False


async def test_exists_upstream_blank_or_unprintable_name_is_false(service, pokeapi):
    assert await service.exists_upstream("  ") is False
    assert await service.exists_upstream("pika\x00chu") is False

    assert pokeapi.calls_for("HEAD") == 1


async def test_health_reports_both_sides(service):
    assert await service.is_healthy() == {"store": True, "upstream": True}


async def test_clear_caches_and_cache_stats(service):
    created = await service.create_pokemon("pikachu")
    service.get_by_id(created.id)
    service.get_by_id(created.id)

    assert service.cache_stats()["pokemon"]["hits"] >= 1

    service.clear_caches()
    assert all(stats["size"] == 0 for stats in service.cache_stats().values())


async def test_all_three_seed_payloads_can_be_created(service, repository):
    for payload in (PIKACHU, BULBASAUR, RAICHU):
        await service.create_pokemon(payload["name"])

    assert repository.count() == 3
