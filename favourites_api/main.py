import logging
import secrets
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import favourites
from .schemas.error import ErrorType, ValidationErrorDetail
from .services.dependencies import build_favourites_service
from .services.favourites import (
    DuplicateFavouriteIdError,
    FavouriteNotFoundError,
    FavouritesError,
    FavouriteStore,
    InvalidIdentityError,
    MalformedPayloadError,
    SchemaViolationError,
    UnknownAssetKindError,
)
from .settings import AppSettings, get_settings
from .utils.body_limit import BodySizeLimitMiddleware
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_json_response,
)
from .utils.rate_limit import RateLimiter, rate_limit_key
from .utils.request_context import (
    REQUEST_ID_HEADER,
    bound_request_id,
    current_request_id,
    new_request_id,
)

# Configure logging
logging.basicConfig(
    level=get_settings().log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Health checks stay reachable without credentials and are never throttled.
UNGUARDED_PATHS = frozenset({"/healthz", "/readyz"})

HTTP_422_UNPROCESSABLE = 422

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

# error class -> (error type, status code, message)
_DOMAIN_ERRORS: dict[type[FavouritesError], tuple[ErrorType, int, str]] = {
    InvalidIdentityError: (
        ErrorType.INVALID_IDENTITY,
        status.HTTP_400_BAD_REQUEST,
        "Invalid identifier",
    ),
    MalformedPayloadError: (
        ErrorType.MALFORMED_PAYLOAD,
        status.HTTP_400_BAD_REQUEST,
        "Malformed asset payload",
    ),
    UnknownAssetKindError: (
        ErrorType.UNKNOWN_ASSET_KIND,
        status.HTTP_400_BAD_REQUEST,
        "Unknown asset type",
    ),
    SchemaViolationError: (
        ErrorType.SCHEMA_VIOLATION,
        HTTP_422_UNPROCESSABLE,
        "Asset failed schema validation",
    ),
    FavouriteNotFoundError: (
        ErrorType.NOT_FOUND,
        status.HTTP_404_NOT_FOUND,
        "Favourite not found",
    ),
    DuplicateFavouriteIdError: (
        ErrorType.CONFLICT,
        status.HTTP_409_CONFLICT,
        "Favourite already exists",
    ),
}


def _validate_environment(active_settings: AppSettings) -> None:
    """Log warnings for optional configuration left unset."""

    warnings = active_settings.optional_config_warnings()
    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


def _classify(exc: FavouritesError) -> tuple[ErrorType, int, str]:
    for klass in type(exc).__mro__:
        if klass in _DOMAIN_ERRORS:
            return _DOMAIN_ERRORS[klass]
    return ErrorType.INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"


async def favourites_exception_handler(request: Request, exc: FavouritesError) -> JSONResponse:
    """Translate domain failures into structured error payloads."""

    error_type, status_code, message = _classify(exc)
    logger.warning(
        "%s for request %s to %s: %s",
        type(exc).__name__,
        current_request_id(),
        request.url.path,
        exc,
    )

    if isinstance(exc, SchemaViolationError):
        response = build_validation_error_response(
            error_type=error_type,
            message=message,
            detail=str(exc),
            status_code=status_code,
            path=str(request.url.path),
            errors=[
                ValidationErrorDetail(
                    field=f"asset.{name}", message="Must not be empty", value=None
                )
                for name in exc.fields
            ],
        )
    else:
        response = build_error_response(
            error_type=error_type,
            message=message,
            detail=str(exc),
            status_code=status_code,
            path=str(request.url.path),
        )
    return error_json_response(response)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI request validation errors."""

    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        current_request_id(),
        request.url.path,
        len(errors),
    )

    return error_json_response(
        build_validation_error_response(
            message="Request validation failed",
            detail=f"{len(errors)} validation error(s)",
            status_code=HTTP_422_UNPROCESSABLE,
            path=str(request.url.path),
            errors=errors,
        )
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""

    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        current_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    return error_json_response(
        build_error_response(
            error_type=ErrorType.INTERNAL_ERROR,
            message="Internal server error",
            detail=f"An unexpected error occurred: {type(exc).__name__}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            path=str(request.url.path),
        )
    )


def _install_middleware(app: FastAPI, active_settings: AppSettings) -> None:
    """Register HTTP middleware; the last one registered runs outermost."""

    rate_limiter = RateLimiter(active_settings.rate_limit_seconds)
    app.state.rate_limiter = rate_limiter

    @app.middleware("http")
    async def require_api_key(request: Request, call_next):
        if (
            not active_settings.auth_enabled
            or request.url.path in UNGUARDED_PATHS
            or secrets.compare_digest(
                request.headers.get("X-API-Key", "").encode(),
                active_settings.api_key.encode(),
            )
        ):
            return await call_next(request)
        return error_json_response(
            build_error_response(
                error_type=ErrorType.AUTHENTICATION_ERROR,
                message="Unauthorized",
                detail="A valid X-API-Key header is required",
                status_code=status.HTTP_401_UNAUTHORIZED,
                path=str(request.url.path),
            )
        )

    @app.middleware("http")
    async def throttle_requests(request: Request, call_next):
        if request.url.path in UNGUARDED_PATHS:
            return await call_next(request)
        client_host = request.client.host if request.client else None
        key = rate_limit_key(request.url.path, client_host)
        if rate_limiter.allow(key):
            return await call_next(request)
        retry_after = rate_limiter.retry_after_seconds()
        return error_json_response(
            build_error_response(
                error_type=ErrorType.RATE_LIMITED,
                message="Rate limit exceeded",
                detail=f"Too many requests for {key}",
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                path=str(request.url.path),
                retry_after=retry_after,
            ),
            headers={"Retry-After": str(retry_after)},
        )

    app.add_middleware(
        BodySizeLimitMiddleware, max_body_bytes=active_settings.max_body_bytes
    )

    if active_settings.http_log_enabled:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - started) * 1000
            logger.info(
                'method=%s path=%s status=%d dur=%.1fms ua="%s" req_id=%s',
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                request.headers.get("user-agent", ""),
                current_request_id(),
            )
            return response

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Bind a fresh request id for the call and echo it to the client."""
        with bound_request_id(new_request_id()) as request_id:
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=active_settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-API-Key", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        return response


def create_app(
    active_settings: AppSettings | None = None,
    *,
    store: FavouriteStore | None = None,
) -> FastAPI:
    """Build the API with its own store and service instances.

    Tests pass explicit settings and, when they need to inspect it, a store.
    """

    active_settings = active_settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        _validate_environment(active_settings)
        logger.info("=" * 60)
        logger.info("Favourites API starting (env: %s)", active_settings.app_env)
        logger.info("Storage: in-memory (data is lost on restart)")
        logger.info("=" * 60)
        yield
        logger.info("Shutting down Favourites API")

    app = FastAPI(
        title="Favourites API",
        version=__version__,
        description="Save, list, update and delete favourite charts, insights and audiences.",
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = active_settings
    app.state.favourites_service = build_favourites_service(store)

    app.add_exception_handler(FavouritesError, favourites_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    _install_middleware(app, active_settings)

    @app.get("/healthz", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        """Liveness check."""
        return {"status": "ok"}

    @app.get("/readyz", tags=["system"])
    async def readiness() -> dict[str, bool]:
        """Readiness check; the in-memory store is ready as soon as the app is."""
        return {"ready": True}

    app.include_router(favourites.router, prefix="/users", tags=["favourites"])
    return app


app = create_app()
