"""Pokemon storage protocol.

Defines the interface for any durable backend that owns the catalog's
pokemon records.

Implementations can include:
- In-process dictionary (default, tests)
- Redis
- A relational database
"""

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable

from pokemon_catalog.entities import Page, PageRequest, PokemonEntity


@runtime_checkable
class PokemonStore(Protocol):
    """Protocol for pokemon storage backends.

    Name lookups are case-insensitive. Name and external id are unique;
    ``save`` raises ``ConflictError`` when either would be duplicated.
    """

    def save(self, pokemon: PokemonEntity) -> PokemonEntity:
        """Insert (no id) or update (with id) a pokemon.

        Args:
            pokemon: The entity to persist

        Returns:
            The stored entity with id, timestamps and version assigned

        Raises:
            ConflictError: If the name or external id is already taken
        """
        ...

    def find_by_id(self, pokemon_id: int) -> PokemonEntity | None:
        ...

    def find_by_name(self, name: str) -> PokemonEntity | None:
        """Find a pokemon by name, ignoring case."""
        ...

    def find_by_external_id(self, external_id: int) -> PokemonEntity | None:
        ...

    def exists_by_id(self, pokemon_id: int) -> bool:
        ...

    def exists_by_name(self, name: str) -> bool:
        """Check for a pokemon by name, ignoring case."""
        ...

    def exists_by_external_id(self, external_id: int) -> bool:
        ...

    def find_page(self, page_request: PageRequest) -> Page[PokemonEntity]:
        """Return one sorted page of all pokemon.

        Raises:
            ValidationError: If the sort field is unknown
        """
        ...

    def find_by_type(self, type_name: str, page_request: PageRequest) -> Page[PokemonEntity]:
        """Pokemon having ``type_name`` among their types, ignoring case."""
        ...

    def find_by_ability(self, ability: str, page_request: PageRequest) -> Page[PokemonEntity]:
        """Pokemon having ``ability`` among their abilities, ignoring case."""
        ...

    def find_by_name_containing(self, text: str, page_request: PageRequest) -> Page[PokemonEntity]:
        """Pokemon whose name contains ``text``, ignoring case."""
        ...

    def delete_by_id(self, pokemon_id: int) -> bool:
        """Delete a pokemon.

        Returns:
            True if a record was removed, False otherwise
        """
        ...

    def count(self) -> int:
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Scope in which writes are rolled back if the block raises."""
        ...

    def health_check(self) -> bool:
        ...
