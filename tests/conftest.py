"""Shared fixtures: a fake clock, a fake PokeAPI and a wired service."""

import copy

import httpx
import pytest

from pokemon_catalog.cache import CacheTiers
from pokemon_catalog.config import Settings
from pokemon_catalog.repositories import InMemoryPokemonRepository, PokeApiClient
from pokemon_catalog.services import PokemonService

RESOURCE_URL = "https://pokeapi.test/api/v2/pokemon"

PIKACHU = {
    "id": 25,
    "name": "pikachu",
    "height": 4,
    "weight": 60,
    "base_experience": 112,
    "types": [{"slot": 1, "type": {"name": "electric", "url": "https://pokeapi.test/type/13/"}}],
    "abilities": [
        {"slot": 1, "is_hidden": False, "ability": {"name": "static"}},
        {"slot": 3, "is_hidden": True, "ability": {"name": "lightning-rod"}},
    ],
    "sprites": {"front_default": "sprite-url", "back_default": "back-url"},
    "order": 35,
}

BULBASAUR = {
    "id": 1,
    "name": "bulbasaur",
    "height": 7,
    "weight": 69,
    "base_experience": 64,
    "types": [
        {"slot": 1, "type": {"name": "grass"}},
        {"slot": 2, "type": {"name": "poison"}},
    ],
    "abilities": [{"slot": 1, "is_hidden": False, "ability": {"name": "overgrow"}}],
    "sprites": {"front_default": "bulbasaur.png"},
}

RAICHU = {
    "id": 26,
    "name": "raichu",
    "height": 8,
    "weight": 300,
    "base_experience": 218,
    "types": [{"slot": 1, "type": {"name": "electric"}}],
    "abilities": [{"slot": 1, "is_hidden": False, "ability": {"name": "static"}}],
    "sprites": {"front_default": None},
}


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePokeApi:
    """In-process stand-in for PokeAPI served through httpx.MockTransport."""

    def __init__(self, *pokemon: dict) -> None:
        self.pokemon = {p["name"]: copy.deepcopy(p) for p in pokemon}
        self.calls: list[tuple[str, str]] = []
        self.failure: Exception | None = None
        self.status_override: int | None = None

    def calls_for(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

    def handler(self, request: httpx.Request) -> httpx.Response:
        name = request.url.path.rstrip("/").rsplit("/", 1)[-1]
        self.calls.append((request.method, name))
        if self.failure is not None:
            raise self.failure
        if self.status_override is not None:
            return httpx.Response(self.status_override, json={"detail": "boom"})
        if name == "pokemon":
            return httpx.Response(200)
        payload = self.pokemon.get(name)
        if payload is None:
            return httpx.Response(404, text="Not Found")
        if request.method == "HEAD":
            return httpx.Response(200)
        return httpx.Response(200, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(pokeapi_base_url="https://pokeapi.test/api/v2", store_backend="memory")


@pytest.fixture
def caches(clock, test_settings) -> CacheTiers:
    return CacheTiers.create(test_settings, clock=clock)


@pytest.fixture
def pokeapi() -> FakePokeApi:
    return FakePokeApi(PIKACHU, BULBASAUR, RAICHU)


@pytest.fixture
def source(pokeapi, caches) -> PokeApiClient:
    return PokeApiClient(
        fetch_cache=caches.pokemon,
        exists_cache=caches.exists,
        resource_url=RESOURCE_URL,
        client=pokeapi.client(),
    )


@pytest.fixture
def repository() -> InMemoryPokemonRepository:
    return InMemoryPokemonRepository()


@pytest.fixture
def service(repository, source, caches) -> PokemonService:
    return PokemonService.create(repository=repository, source=source, caches=caches)
