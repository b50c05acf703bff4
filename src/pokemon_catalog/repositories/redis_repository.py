"""Redis implementation of PokemonStore.

Satisfies the PokemonStore protocol through structural typing. Layout:

- ``<prefix>:<id>``               pokemon as a JSON string
- ``<prefix>:name:<name>``        id owning a (normalized) name
- ``<prefix>:external:<ext_id>``  id owning an upstream id
- ``<prefix>:ids``                set of stored ids
- ``<prefix>:id_seq``             id counter

Uniqueness is enforced with ``SET NX`` on the index keys, so two processes
racing to store the same name cannot both win. Paging, sorting and
filtering happen client-side over the id set.
"""

import json
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import redis

from pokemon_catalog.config import get_redis_client, settings
from pokemon_catalog.entities import Page, PageRequest, PokemonEntity, normalize_name
from pokemon_catalog.exceptions import ConflictError
from pokemon_catalog.logging import get_logger
from pokemon_catalog.repositories.paging import paginate

logger = get_logger(__name__)


def _dump(pokemon: PokemonEntity) -> str:
    return json.dumps(
        {
            "id": pokemon.id,
            "external_id": pokemon.external_id,
            "name": pokemon.name,
            "height": pokemon.height,
            "weight": pokemon.weight,
            "base_experience": pokemon.base_experience,
            "types": list(pokemon.types),
            "abilities": list(pokemon.abilities),
            "sprite_url": pokemon.sprite_url,
            "created_at": pokemon.created_at.isoformat() if pokemon.created_at else None,
            "updated_at": pokemon.updated_at.isoformat() if pokemon.updated_at else None,
            "version": pokemon.version,
        }
    )


def _load(raw: str | bytes) -> PokemonEntity:
    data: dict[str, Any] = json.loads(raw)
    for stamp in ("created_at", "updated_at"):
        if data.get(stamp):
            data[stamp] = datetime.fromisoformat(data[stamp])
    data["types"] = tuple(data.get("types") or ())
    data["abilities"] = tuple(data.get("abilities") or ())
    return PokemonEntity(**data)


class RedisPokemonRepository:
    """Redis-backed pokemon store."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis pokemon repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Namespace for every key. If None, uses settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.redis_key_prefix
        self._tx = threading.local()

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisPokemonRepository":
        """Factory method to create RedisPokemonRepository with defaults."""
        return cls(key_prefix=key_prefix)

    def _key(self, pokemon_id: int | str) -> str:
        return f"{self._prefix}:{pokemon_id}"

    def _name_key(self, name: str) -> str:
        return f"{self._prefix}:name:{normalize_name(name)}"

    def _external_key(self, external_id: int) -> str:
        return f"{self._prefix}:external:{external_id}"

    @property
    def _ids_key(self) -> str:
        return f"{self._prefix}:ids"

    def _claim(self, key: str, pokemon_id: int) -> bool:
        """Point an index key at ``pokemon_id`` unless another id holds it."""
        if self._client.set(key, pokemon_id, nx=True):
            return True
        holder = self._client.get(key)
        return holder is not None and int(holder) == pokemon_id

    def save(self, pokemon: PokemonEntity) -> PokemonEntity:
        """Store a pokemon, claiming its name and external id first.

        Raises:
            ConflictError: If another pokemon owns the name or external id
        """
        name = normalize_name(pokemon.name)
        now = datetime.now(timezone.utc)
        previous = None

        if pokemon.id is None:
            pokemon_id = int(self._client.incr(f"{self._prefix}:id_seq"))
            stored = replace(pokemon, id=pokemon_id, name=name, created_at=now, updated_at=now, version=0)
        else:
            pokemon_id = pokemon.id
            previous = self.find_by_id(pokemon_id)
            if previous is None:
                raise ConflictError(f"Pokemon with id {pokemon_id} no longer exists", field="id")
            stored = replace(
                pokemon,
                name=name,
                created_at=previous.created_at,
                updated_at=now,
                version=(previous.version or 0) + 1,
            )

        claimed: list[str] = []
        for key, field in (
            (self._name_key(name), "name"),
            (self._external_key(stored.external_id), "external_id"),
        ):
            if not self._claim(key, pokemon_id):
                for taken in claimed:
                    self._client.delete(taken)
                raise ConflictError(f"{field} of '{name}' is already stored", field=field)
            if previous is None or key not in self._index_keys(previous):
                claimed.append(key)

        pipe = self._client.pipeline()
        pipe.set(self._key(pokemon_id), _dump(stored))
        pipe.sadd(self._ids_key, pokemon_id)
        if previous is not None:
            for stale in self._index_keys(previous) - self._index_keys(stored):
                pipe.delete(stale)
        try:
            pipe.execute()
        except redis.RedisError:
            if claimed:
                self._client.delete(*claimed)
            logger.error("store_save_failed", pokemon_id=pokemon_id, released=claimed)
            raise

        if previous is None and getattr(self._tx, "created", None) is not None:
            self._tx.created.append(pokemon_id)
        return stored

    def _index_keys(self, pokemon: PokemonEntity) -> set[str]:
        return {self._name_key(pokemon.name), self._external_key(pokemon.external_id)}

    def find_by_id(self, pokemon_id: int) -> PokemonEntity | None:
        raw = self._client.get(self._key(pokemon_id))
        return _load(raw) if raw else None

    def _find_via(self, index_key: str) -> PokemonEntity | None:
        pokemon_id = self._client.get(index_key)
        return self.find_by_id(int(pokemon_id)) if pokemon_id is not None else None

    def find_by_name(self, name: str) -> PokemonEntity | None:
        return self._find_via(self._name_key(name))

    def find_by_external_id(self, external_id: int) -> PokemonEntity | None:
        return self._find_via(self._external_key(external_id))

    def exists_by_id(self, pokemon_id: int) -> bool:
        return bool(self._client.exists(self._key(pokemon_id)))

    def exists_by_name(self, name: str) -> bool:
        return bool(self._client.exists(self._name_key(name)))

    def exists_by_external_id(self, external_id: int) -> bool:
        return bool(self._client.exists(self._external_key(external_id)))

    def _all(self) -> list[PokemonEntity]:
        ids = sorted(int(i) for i in self._client.smembers(self._ids_key))
        if not ids:
            return []
        raws = self._client.mget([self._key(i) for i in ids])
        return [_load(raw) for raw in raws if raw]

    def find_page(self, page_request: PageRequest) -> Page[PokemonEntity]:
        return paginate(self._all(), page_request)

    def find_by_type(self, type_name: str, page_request: PageRequest) -> Page[PokemonEntity]:
        return paginate((p for p in self._all() if p.has_type(type_name)), page_request)

    def find_by_ability(self, ability: str, page_request: PageRequest) -> Page[PokemonEntity]:
        return paginate((p for p in self._all() if p.has_ability(ability)), page_request)

    def find_by_name_containing(self, text: str, page_request: PageRequest) -> Page[PokemonEntity]:
        needle = text.strip().lower()
        return paginate((p for p in self._all() if needle in p.name), page_request)

    def delete_by_id(self, pokemon_id: int) -> bool:
        pokemon = self.find_by_id(pokemon_id)
        if pokemon is None:
            return False

        pipe = self._client.pipeline()
        pipe.delete(self._key(pokemon_id), *sorted(self._index_keys(pokemon)))
        pipe.srem(self._ids_key, pokemon_id)
        pipe.execute()
        return True

    def count(self) -> int:
        return int(self._client.scard(self._ids_key))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Delete pokemon inserted inside the block if the block raises."""
        self._tx.created = []
        try:
            yield
        except BaseException:
            for pokemon_id in self._tx.created:
                self.delete_by_id(pokemon_id)
            logger.warning("store_transaction_rolled_back", removed=list(self._tx.created))
            raise
        finally:
            self._tx.created = None

    def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
