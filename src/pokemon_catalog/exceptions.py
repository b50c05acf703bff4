"""Domain error taxonomy.

Services and repositories raise these; the API layer renders them into the
error envelope using ``error_code`` and ``status_code``. Nothing here knows
about HTTP beyond the status number.
"""

from typing import Any


class CatalogError(Exception):
    """Base exception for the catalog service."""

    error_code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(CatalogError):
    """Malformed input, reported per field."""

    error_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors: dict[str, str] = field_errors or {}


class NotFoundError(CatalogError):
    """A requested pokemon does not exist."""

    error_code = "POKEMON_NOT_FOUND"
    status_code = 404


class PokemonNotFoundError(NotFoundError):
    """The pokemon is absent from the local store."""

    def __init__(self, key: Any, by: str = "id") -> None:
        shown = f"'{key}'" if isinstance(key, str) else key
        super().__init__(f"Pokemon with {by} {shown} not found")
        self.key = key
        self.by = by


class ExternalPokemonNotFoundError(NotFoundError):
    """The upstream source has no pokemon with this name."""

    error_code = "EXTERNAL_POKEMON_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"Pokemon '{name}' not found in PokeAPI")
        self.name = name


class PokemonAlreadyExistsError(CatalogError):
    """Create was called for a name that is already stored."""

    error_code = "POKEMON_ALREADY_EXISTS"
    status_code = 409

    def __init__(self, name: str) -> None:
        super().__init__(f"Pokemon '{name}' already exists")
        self.name = name


class ConflictError(CatalogError):
    """A store-level uniqueness constraint was violated."""

    error_code = "DATA_INTEGRITY_ERROR"
    status_code = 409

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ExternalServiceError(CatalogError):
    """The upstream source failed (transport, status or payload)."""

    error_code = "EXTERNAL_SERVICE_ERROR"
    status_code = 502

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message, details=str(cause) if cause is not None else None)
        self.cause = cause
