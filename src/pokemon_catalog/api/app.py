"""FastAPI application for the pokemon catalog.

Routes delegate to PokemonHandler; domain errors are rendered here into the
``{success: false, message, errorCode, ...}`` envelope.
"""

from typing import Annotated, Any

from fastapi import FastAPI, Path, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pokemon_catalog.api.dependencies import HandlerDep, lifespan
from pokemon_catalog.config import settings
from pokemon_catalog.dto import (
    ApiResponse,
    CreatePokemonRequest,
    ErrorResponse,
    ExistsResponse,
    HealthCheckResponse,
    PokemonPageResponse,
    PokemonResponse,
    PokemonStatsResponse,
)
from pokemon_catalog.exceptions import CatalogError, ExternalServiceError, ValidationError
from pokemon_catalog.logging import clear_request_id, get_logger, set_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
EXTERNAL_SERVICE_MESSAGE = "Temporary error in an external service. Please try again later."
INTERNAL_ERROR_MESSAGE = "Internal server error. Contact the administrator if the problem persists."

PageParam = Annotated[int, Query(ge=0, description="Zero-based page number")]
SizeParam = Annotated[int, Query(ge=1, le=100, description="Page size")]
IdParam = Annotated[int, Path(gt=0, description="Catalog id")]

app = FastAPI(
    title="Pokemon Catalog API",
    description="Local catalog mirroring pokemon from PokeAPI",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    """Bind a request id for log correlation and echo it back."""
    request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
    try:
        response = await call_next(request)
    finally:
        clear_request_id()
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _error(request: Request, status_code: int, body: ErrorResponse) -> JSONResponse:
    body.path = request.url.path
    return JSONResponse(status_code=status_code, content=body.to_content())


@app.exception_handler(CatalogError)
async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    """Render domain errors using their code and status."""
    if isinstance(exc, ExternalServiceError):
        logger.error("external_service_error", path=request.url.path, error=exc.message)
        body = ErrorResponse(
            message=EXTERNAL_SERVICE_MESSAGE,
            error_code=exc.error_code,
            details=exc.message if exc.details is None else f"{exc.message}: {exc.details}",
        )
    elif isinstance(exc, ValidationError):
        logger.warning("validation_error", path=request.url.path, error=exc.message)
        body = ErrorResponse(
            message=exc.message,
            error_code=exc.error_code,
            field_errors=exc.field_errors or None,
        )
    else:
        logger.warning("request_failed", path=request.url.path, code=exc.error_code, error=exc.message)
        body = ErrorResponse(message=exc.message, error_code=exc.error_code, details=exc.details)
    return _error(request, exc.status_code, body)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's request validation failures as field errors."""
    field_errors: dict[str, str] = {}
    for error in exc.errors():
        location = list(error.get("loc", ()))
        if location and location[0] in ("body", "query", "path", "header"):
            location = location[1:]
        field = ".".join(str(part) for part in location) or "general"
        field_errors.setdefault(field, error.get("msg", "invalid value"))

    logger.warning("request_validation_error", path=request.url.path, fields=sorted(field_errors))
    body = ErrorResponse(
        message="Invalid request data",
        error_code=ValidationError.error_code,
        field_errors=field_errors,
    )
    return _error(request, status.HTTP_400_BAD_REQUEST, body)


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error", path=request.url.path)
    body = ErrorResponse(
        message=INTERNAL_ERROR_MESSAGE,
        error_code=CatalogError.error_code,
        details=type(exc).__name__,
    )
    return _error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, body)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Pokemon Catalog API",
        "version": "0.1.0",
        "description": "Local catalog mirroring pokemon from PokeAPI",
        "endpoints": {
            "pokemon": "/pokemon",
            "stats": "/pokemon/stats",
            "cache": "/cache/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> JSONResponse:
    """Health check endpoint; 503 when the store is unreachable."""
    result = await handler.health_check()
    code = status.HTTP_200_OK if result.store_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=jsonable_encoder(result, by_alias=True))


@app.post(
    "/pokemon",
    response_model=ApiResponse[PokemonResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_pokemon(request: CreatePokemonRequest, handler: HandlerDep):
    """Mirror a pokemon from PokeAPI into the catalog."""
    return await handler.create_pokemon(request)


@app.get("/pokemon", response_model=ApiResponse[PokemonPageResponse])
async def list_pokemon(
    handler: HandlerDep,
    page: PageParam = 0,
    size: SizeParam = 10,
    sort_by: Annotated[str, Query(alias="sortBy")] = "id",
    sort_dir: Annotated[str, Query(alias="sortDir")] = "asc",
):
    """List stored pokemon, paginated and sorted."""
    return await handler.list_pokemon(page, size, sort_by, sort_dir)


@app.get("/pokemon/stats", response_model=ApiResponse[PokemonStatsResponse])
async def pokemon_stats(handler: HandlerDep):
    """Catalog totals (may lag writes by a couple of minutes)."""
    return await handler.get_stats()


@app.get("/pokemon/search", response_model=ApiResponse[PokemonPageResponse])
async def search_pokemon(
    handler: HandlerDep,
    query: Annotated[str, Query(min_length=1)],
    page: PageParam = 0,
    size: SizeParam = 10,
):
    """Pokemon whose name contains ``query``."""
    return await handler.search(query, page, size)


@app.get("/pokemon/name/{name}", response_model=ApiResponse[PokemonResponse])
async def get_pokemon_by_name(name: str, handler: HandlerDep):
    return await handler.get_by_name(name)


@app.get("/pokemon/type/{type_name}", response_model=ApiResponse[PokemonPageResponse])
async def get_pokemon_by_type(
    type_name: str,
    handler: HandlerDep,
    page: PageParam = 0,
    size: SizeParam = 10,
):
    return await handler.find_by_type(type_name, page, size)


@app.get("/pokemon/ability/{ability}", response_model=ApiResponse[PokemonPageResponse])
async def get_pokemon_by_ability(
    ability: str,
    handler: HandlerDep,
    page: PageParam = 0,
    size: SizeParam = 10,
):
    return await handler.find_by_ability(ability, page, size)


@app.get("/pokemon/exists/{name}", response_model=ApiResponse[ExistsResponse])
async def pokemon_exists_upstream(name: str, handler: HandlerDep):
    """Probe PokeAPI for a name. ``false`` may also mean PokeAPI is unreachable."""
    return await handler.exists_upstream(name)


@app.get("/pokemon/{pokemon_id}", response_model=ApiResponse[PokemonResponse])
async def get_pokemon(pokemon_id: IdParam, handler: HandlerDep):
    return await handler.get_by_id(pokemon_id)


@app.delete("/pokemon/{pokemon_id}", response_model=ApiResponse[None])
async def delete_pokemon(pokemon_id: IdParam, handler: HandlerDep):
    return await handler.delete(pokemon_id)


@app.get("/cache/stats", response_model=ApiResponse[dict])
async def cache_stats(handler: HandlerDep):
    """Per tier hit/miss/eviction counters."""
    return await handler.cache_stats()


@app.delete("/cache", response_model=ApiResponse[None])
async def clear_cache(handler: HandlerDep):
    """Drop every cached entry in every tier."""
    return await handler.clear_cache()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pokemon_catalog.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
