#!/usr/bin/env python3
"""
Demo script for the pokemon catalog.

Mirrors a few pokemon from the live PokeAPI into an in-memory store and
shows the cache tiers at work. Needs network access.
"""

import asyncio
import time

from pokemon_catalog.cache import CacheTiers
from pokemon_catalog.entities import PageRequest
from pokemon_catalog.exceptions import CatalogError
from pokemon_catalog.repositories import InMemoryPokemonRepository, PokeApiClient
from pokemon_catalog.services import PokemonService


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_create(service: PokemonService) -> None:
    """Mirror pokemon and show each failure kind."""
    print_section("Creating pokemon")

    for name in ["pikachu", "Bulbasaur", "  RAICHU ", "pikachu", "missingno"]:
        start = time.time()
        try:
            pokemon = await service.create_pokemon(name)
            print(f"  ✓ {pokemon.name:<12} id={pokemon.id} types={list(pokemon.types)}")
        except CatalogError as e:
            print(f"  ✗ {name.strip():<12} {e.error_code}: {e.message}")
        print(f"    ({(time.time() - start) * 1000:.1f}ms)")


def demo_reads(service: PokemonService) -> None:
    """Show cache-first reads."""
    print_section("Cache-first reads")

    for attempt in (1, 2):
        start = time.time()
        service.get_by_name("pikachu")
        print(f"  get_by_name #{attempt}: {(time.time() - start) * 1000:.3f}ms")

    for direction in ("asc", "desc"):
        page = service.list_pokemon(PageRequest(0, 10, "name", direction))
        print(f"  list by name {direction}: {[p.name for p in page.content]}")

    electric = service.find_by_type("electric", PageRequest())
    print(f"  electric: {[p.name for p in electric.content]}")
    print(f"  stats: {service.stats()}")


def demo_cache_stats(service: PokemonService) -> None:
    print_section("Cache tiers")
    print(f"{'Tier':<18} {'Size':<6} {'Hits':<6} {'Misses':<8} {'Hit rate':<8}")
    for name, stats in service.cache_stats().items():
        print(
            f"{name:<18} {stats['size']:<6} {stats['hits']:<6} "
            f"{stats['misses']:<8} {stats['hit_rate']:<8.2%}"
        )


async def main() -> None:
    tiers = CacheTiers.create()
    source = PokeApiClient.create(fetch_cache=tiers.pokemon, exists_cache=tiers.exists)
    service = PokemonService.create(
        repository=InMemoryPokemonRepository.create(),
        source=source,
        caches=tiers,
    )

    try:
        await demo_create(service)
        demo_reads(service)
        demo_cache_stats(service)
    finally:
        await source.close()


if __name__ == "__main__":
    asyncio.run(main())
