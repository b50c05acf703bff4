import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


def _minutes(name: str, default: int) -> float:
    return float(os.getenv(name, str(default * 60)))


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream (PokeAPI)
    pokeapi_base_url: str = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2")
    pokeapi_resource: str = os.getenv("POKEAPI_RESOURCE", "pokemon")
    pokeapi_timeout: float = float(os.getenv("POKEAPI_TIMEOUT", "30"))

    # Store
    store_backend: str = os.getenv("STORE_BACKEND", "memory").lower()
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_key_prefix: str = os.getenv("REDIS_KEY_PREFIX", "pokemon")

    # Cache tiers: (max entries, ttl seconds)
    cache_pokemon_max_size: int = int(os.getenv("CACHE_POKEMON_MAX_SIZE", "1000"))
    cache_pokemon_ttl: float = _minutes("CACHE_POKEMON_TTL", 30)
    cache_exists_max_size: int = int(os.getenv("CACHE_EXISTS_MAX_SIZE", "500"))
    cache_exists_ttl: float = _minutes("CACHE_EXISTS_TTL", 15)
    cache_list_max_size: int = int(os.getenv("CACHE_LIST_MAX_SIZE", "100"))
    cache_list_ttl: float = _minutes("CACHE_LIST_TTL", 10)
    cache_search_max_size: int = int(os.getenv("CACHE_SEARCH_MAX_SIZE", "200"))
    cache_search_ttl: float = _minutes("CACHE_SEARCH_TTL", 5)
    cache_stats_max_size: int = int(os.getenv("CACHE_STATS_MAX_SIZE", "10"))
    cache_stats_ttl: float = _minutes("CACHE_STATS_TTL", 2)

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")
    log_json: bool = os.getenv("LOG_JSON", "true").lower() == "true"

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def pokeapi_resource_url(self) -> str:
        """Base URL of the upstream resource, without a trailing slash."""
        return f"{self.pokeapi_base_url.rstrip('/')}/{self.pokeapi_resource.strip('/')}"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.pokeapi_timeout <= 0:
            raise ValueError("POKEAPI_TIMEOUT must be greater than 0")

        if self.store_backend not in ("memory", "redis"):
            raise ValueError(
                f"STORE_BACKEND must be one of ['memory', 'redis'], got {self.store_backend!r}"
            )

        for tier in ("pokemon", "exists", "list", "search", "stats"):
            if getattr(self, f"cache_{tier}_max_size") <= 0:
                raise ValueError(f"CACHE_{tier.upper()}_MAX_SIZE must be greater than 0")
            if getattr(self, f"cache_{tier}_ttl") <= 0:
                raise ValueError(f"CACHE_{tier.upper()}_TTL must be greater than 0")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
