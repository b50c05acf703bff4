"""
Tests for the PokeAPI client.
"""

import httpx
import pytest

from pokemon_catalog.exceptions import ExternalPokemonNotFoundError, ExternalServiceError
from pokemon_catalog.repositories import PokeApiClient


async def test_fetch_transforms_payload(source):
    pokemon = await source.fetch_by_name("pikachu")

    assert pokemon.external_id == 25
    assert pokemon.types == ("electric",)
    assert pokemon.sprite_url == "sprite-url"
    assert pokemon.id is None


async def test_fetch_is_cached_by_normalized_name(source, pokeapi, caches):
    await source.fetch_by_name("pikachu")
    await source.fetch_by_name(" PIKACHU ")

    assert pokeapi.calls_for("GET") == 1
    assert PokeApiClient.fetch_cache_key("Pikachu") in caches.pokemon


async def test_fetch_cache_expires_after_thirty_minutes(source, pokeapi, clock):
    await source.fetch_by_name("pikachu")
    clock.advance(30 * 60)
    await source.fetch_by_name("pikachu")

    assert pokeapi.calls_for("GET") == 2


async def test_404_is_external_not_found(source):
    with pytest.raises(ExternalPokemonNotFoundError) as exc_info:
        await source.fetch_by_name("missingno")

    assert exc_info.value.error_code == "EXTERNAL_POKEMON_NOT_FOUND"
    assert "missingno" in exc_info.value.message


async def test_not_found_is_not_cached(source, pokeapi, caches):
    for _ in range(2):
        with pytest.raises(ExternalPokemonNotFoundError):
            await source.fetch_by_name("missingno")

    assert pokeapi.calls_for("GET") == 2
    assert len(caches.pokemon) == 0


@pytest.mark.parametrize("status_code", [500, 503, 429, 400])
async def test_other_statuses_are_external_failures(source, pokeapi, status_code):
    pokeapi.status_override = status_code

    with pytest.raises(ExternalServiceError) as exc_info:
        await source.fetch_by_name("pikachu")

    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
    assert str(status_code) in exc_info.value.message


async def test_timeout_is_an_external_failure(source, pokeapi):
    pokeapi.failure = httpx.ReadTimeout("timed out")

    with pytest.raises(ExternalServiceError) as exc_info:
        await source.fetch_by_name("pikachu")

    assert isinstance(exc_info.value.cause, httpx.ReadTimeout)


async def test_malformed_payload_is_an_external_failure(caches):
    def handler(request):
        return httpx.Response(200, json={"name": "pikachu"})  # no id

    client = PokeApiClient(
        fetch_cache=caches.pokemon,
        exists_cache=caches.exists,
        resource_url="https://pokeapi.test/api/v2/pokemon",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(ExternalServiceError):
        await client.fetch_by_name("pikachu")


async def test_non_json_body_is_an_external_failure(caches):
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    client = PokeApiClient(
        fetch_cache=caches.pokemon,
        exists_cache=caches.exists,
        resource_url="https://pokeapi.test/api/v2/pokemon",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(ExternalServiceError):
        await client.fetch_by_name("pikachu")


async def test_exists_uses_head_and_caches(source, pokeapi):
    assert await source.exists("Pikachu") is True
    assert await source.exists("pikachu") is True

    assert pokeapi.calls == [("HEAD", "pikachu")]


async def test_exists_is_false_for_404_and_cached(source, pokeapi):
    assert await source.exists("missingno") is False
    assert await source.exists("missingno") is False
    assert pokeapi.calls_for("HEAD") == 1


async def test_exists_never_raises_and_does_not_cache_failures(source, pokeapi, caches):
    pokeapi.failure = httpx.ConnectError("refused")

    assert await source.exists("pikachu") is False
    assert "pikachu" not in caches.exists

    pokeapi.failure = None
    assert await source.exists("pikachu") is True


async def test_exists_cache_expires_after_fifteen_minutes(source, pokeapi, clock):
    await source.exists("pikachu")
    clock.advance(15 * 60)
    await source.exists("pikachu")

    assert pokeapi.calls_for("HEAD") == 2


async def test_is_available(source, pokeapi):
    assert await source.is_available() is True

    pokeapi.failure = httpx.ConnectError("refused")
    assert await source.is_available() is False


async def test_names_are_sent_as_one_escaped_path_segment(source, pokeapi, caches):
    assert await source.exists("pikachu?x=1") is False

    assert ("HEAD", "pikachu") not in pokeapi.calls
    assert caches.exists.get("pikachu?x=1") is False


async def test_control_characters_in_names_do_not_escape_the_client(source, pokeapi):
    assert await source.exists("pika\x00chu") is False

    with pytest.raises(ExternalPokemonNotFoundError):
        await source.fetch_by_name("pika\x00chu")


async def test_invalid_url_is_an_external_failure(source, pokeapi, caches):
    pokeapi.failure = httpx.InvalidURL("bad url")

    assert await source.exists("pikachu") is False
    assert "pikachu" not in caches.exists
    with pytest.raises(ExternalServiceError):
        await source.fetch_by_name("pikachu")


async def test_exists_with_blank_name_is_false_without_a_request(source, pokeapi, caches):
    assert await source.exists("   ") is False

    assert pokeapi.calls == []
    assert "" not in caches.exists
