"""In-process implementation of PokemonStore.

Satisfies the PokemonStore protocol through structural typing. All state
lives in dictionaries guarded by one re-entrant lock, so concurrent
requests see each write atomically and uniqueness checks cannot race.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone

from pokemon_catalog.entities import Page, PageRequest, PokemonEntity, normalize_name
from pokemon_catalog.exceptions import ConflictError
from pokemon_catalog.logging import get_logger
from pokemon_catalog.repositories.paging import paginate

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryPokemonRepository:
    """Dictionary-backed pokemon store.

    Example:
        ```python
        store = InMemoryPokemonRepository()
        saved = store.save(PokemonEntity(external_id=25, name="pikachu"))
        saved.id       # 1
        saved.version  # 0
        ```
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._by_id: dict[int, PokemonEntity] = {}
        self._id_by_name: dict[str, int] = {}
        self._id_by_external: dict[int, int] = {}
        self._next_id = 1

    @classmethod
    def create(cls) -> "InMemoryPokemonRepository":
        return cls()

    def save(self, pokemon: PokemonEntity) -> PokemonEntity:
        name = normalize_name(pokemon.name)
        with self._lock:
            self._check_unique(name, pokemon.external_id, pokemon.id)
            now = self._clock()

            if pokemon.id is None:
                stored = replace(
                    pokemon,
                    id=self._next_id,
                    name=name,
                    created_at=now,
                    updated_at=now,
                    version=0,
                )
                self._next_id += 1
            else:
                previous = self._by_id.get(pokemon.id)
                if previous is None:
                    raise ConflictError(f"Pokemon with id {pokemon.id} no longer exists", field="id")
                self._id_by_name.pop(previous.name, None)
                self._id_by_external.pop(previous.external_id, None)
                stored = replace(
                    pokemon,
                    name=name,
                    created_at=previous.created_at,
                    updated_at=now,
                    version=(previous.version or 0) + 1,
                )

            self._by_id[stored.id] = stored
            self._id_by_name[name] = stored.id
            self._id_by_external[stored.external_id] = stored.id
            return stored

    def _check_unique(self, name: str, external_id: int, own_id: int | None) -> None:
        holder = self._id_by_name.get(name)
        if holder is not None and holder != own_id:
            raise ConflictError(f"Name '{name}' is already stored", field="name")
        holder = self._id_by_external.get(external_id)
        if holder is not None and holder != own_id:
            raise ConflictError(f"External id {external_id} is already stored", field="external_id")

    def find_by_id(self, pokemon_id: int) -> PokemonEntity | None:
        with self._lock:
            return self._by_id.get(pokemon_id)

    def find_by_name(self, name: str) -> PokemonEntity | None:
        with self._lock:
            pokemon_id = self._id_by_name.get(normalize_name(name))
            return self._by_id.get(pokemon_id) if pokemon_id is not None else None

    def find_by_external_id(self, external_id: int) -> PokemonEntity | None:
        with self._lock:
            pokemon_id = self._id_by_external.get(external_id)
            return self._by_id.get(pokemon_id) if pokemon_id is not None else None

    def exists_by_id(self, pokemon_id: int) -> bool:
        with self._lock:
            return pokemon_id in self._by_id

    def exists_by_name(self, name: str) -> bool:
        with self._lock:
            return normalize_name(name) in self._id_by_name

    def exists_by_external_id(self, external_id: int) -> bool:
        with self._lock:
            return external_id in self._id_by_external

    def _snapshot(self) -> list[PokemonEntity]:
        with self._lock:
            return list(self._by_id.values())

    def find_page(self, page_request: PageRequest) -> Page[PokemonEntity]:
        return paginate(self._snapshot(), page_request)

    def find_by_type(self, type_name: str, page_request: PageRequest) -> Page[PokemonEntity]:
        return paginate((p for p in self._snapshot() if p.has_type(type_name)), page_request)

    def find_by_ability(self, ability: str, page_request: PageRequest) -> Page[PokemonEntity]:
        return paginate((p for p in self._snapshot() if p.has_ability(ability)), page_request)

    def find_by_name_containing(self, text: str, page_request: PageRequest) -> Page[PokemonEntity]:
        needle = text.strip().lower()
        return paginate((p for p in self._snapshot() if needle in p.name), page_request)

    def delete_by_id(self, pokemon_id: int) -> bool:
        with self._lock:
            pokemon = self._by_id.pop(pokemon_id, None)
            if pokemon is None:
                return False
            self._id_by_name.pop(pokemon.name, None)
            self._id_by_external.pop(pokemon.external_id, None)
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the store lock for the block and restore prior state on error."""
        with self._lock:
            state = (dict(self._by_id), dict(self._id_by_name), dict(self._id_by_external), self._next_id)
            try:
                yield
            except BaseException:
                self._by_id, self._id_by_name, self._id_by_external, self._next_id = state
                logger.warning("store_transaction_rolled_back")
                raise

    def health_check(self) -> bool:
        return True
