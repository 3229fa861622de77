"""
Entry point de la API
"""

import logging
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.core.logging import setup_logging
from pokemon_bingo.database import Database
from pokemon_bingo.services.period_service import AmbiguousActiveMonthError

from pokemon_bingo.controllers.health_controller import router as health_router
from pokemon_bingo.controllers.bingo_controller import router as bingo_router
from pokemon_bingo.controllers.leaderboard_controller import router as leaderboard_router
from pokemon_bingo.controllers.profile_controller import router as profile_router
from pokemon_bingo.controllers.pokedex_controller import router as pokedex_router
from pokemon_bingo.controllers.ambassadors_controller import router as ambassadors_router
from pokemon_bingo.controllers.upload_controller import router as upload_router
from pokemon_bingo.controllers.pokemon_controller import router as pokemon_router
from pokemon_bingo.controllers.approvals_controller import router as approvals_router
from pokemon_bingo.controllers.user_controller import router as user_router

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# Parse CORS origins
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",")]
CORS_ORIGIN_REGEX = re.compile(r"https://.*\.vercel\.app") if settings.app_env == "production" else None


def is_allowed_origin(origin: str) -> bool:
    """Check if origin is allowed by explicit list or regex pattern."""
    if not origin:
        return False
    if origin in CORS_ORIGINS:
        return True
    if CORS_ORIGIN_REGEX and CORS_ORIGIN_REGEX.match(origin):
        return True
    return False


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Custom CORS middleware that handles OPTIONS preflight BEFORE routing.

    Query parameter validation would otherwise turn preflight requests into 400s.
    """

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        # Handle preflight OPTIONS request IMMEDIATELY
        if request.method == "OPTIONS":
            if is_allowed_origin(origin):
                return Response(
                    status_code=200,
                    headers={
                        "Access-Control-Allow-Origin": origin,
                        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
                        "Access-Control-Allow-Headers": "Authorization, Content-Type, Accept, Origin, X-Requested-With",
                        "Access-Control-Allow-Credentials": "true",
                        "Access-Control-Max-Age": "86400",  # Cache preflight for 24 hours
                    }
                )
            return Response(status_code=403, content="Origin not allowed")

        response = await call_next(request)

        if is_allowed_origin(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Pokemon Bingo API",
    description="Backend del bingo mensual de shinies",
    version="1.0.0",
    lifespan=lifespan
)

# Add custom CORS middleware (handles OPTIONS before routing)
app.add_middleware(CORSMiddleware)


# ============================================
# ⚠️ Manejo de errores: siempre {error, details?}
# ============================================

def error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        details=jsonable_encoder(exc.errors()),
    )


@app.exception_handler(AmbiguousActiveMonthError)
async def ambiguous_month_handler(request: Request, exc: AmbiguousActiveMonthError):
    logger.error(f"Month table overlap: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@app.exception_handler(PyMongoError)
async def database_exception_handler(request: Request, exc: PyMongoError):
    logger.error(f"Database error on {request.url.path}: {exc.__class__.__name__}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error", details=str(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc.__class__.__name__}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Agrego todos los routers de los controllers al app
app.include_router(health_router, prefix=API_PREFIX)
app.include_router(bingo_router, prefix=API_PREFIX)
app.include_router(leaderboard_router, prefix=API_PREFIX)
app.include_router(profile_router, prefix=API_PREFIX)
app.include_router(pokedex_router, prefix=API_PREFIX)
app.include_router(ambassadors_router, prefix=API_PREFIX)
app.include_router(upload_router, prefix=API_PREFIX)
app.include_router(pokemon_router, prefix=API_PREFIX)
app.include_router(approvals_router, prefix=API_PREFIX)
app.include_router(user_router, prefix=API_PREFIX)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Pokemon Bingo API",
        "version": "1.0.0",
        "docs": "/docs"  # Link a la documentación interactiva de Swagger
    }
