import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import all models to ensure they're registered with SQLAlchemy Base
# This is needed for relationships between models in different files
from . import (
    models,  # noqa: F401
    models_visit,  # noqa: F401
)
from .config import ALLOWED_ORIGINS, API_PREFIX, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.availability.router import router as availability_router
from .domain.properties.router import router as properties_router
from .domain.users.router import router as users_router
from .domain.visits.router import router as visits_router
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware
from .shared.responses import format_api_error, format_api_response, format_api_success

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    from .rate_limiter import get_redis_client

    if get_redis_client() is not None:
        logger.info("Redis connection established")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Visitae API", version="1.0.0", lifespan=lifespan)


# ============================================================================
# ERROR ENVELOPES
# ============================================================================


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return format_api_error(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert request validation errors to 400 with field-level details, or to
    401 when the issue is with the Authorization header
    """
    errors = exc.errors()
    for error in errors:
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return format_api_error(
                "Not authenticated. Please provide a valid Bearer token in the Authorization header.",
                status_code=401,
            )

    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in errors
    ]
    logger.warning(f"Validation error for {request.url.path}: {details}")
    return format_api_error("Validation error", status_code=400, details=details)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    message = str(exc.orig).lower()
    if "unique" in message or "duplicate" in message:
        logger.warning(f"Duplicate entry on {request.method} {request.url.path}: {exc.orig}")
        return format_api_error("Duplicate entry", status_code=409)
    if "foreign key" in message:
        logger.warning(f"Invalid relation on {request.method} {request.url.path}: {exc.orig}")
        return format_api_error("Reference to a record that does not exist", status_code=400)

    logger.error(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return format_api_error("Internal server error", status_code=500)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return format_api_error("Internal server error", status_code=500)


# ============================================================================
# MIDDLEWARE
# ============================================================================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise

    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.0f}ms)")
    return response


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")


# Log CORS configuration for debugging
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(properties_router, prefix=API_PREFIX)
app.include_router(visits_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(availability_router, prefix=API_PREFIX)


@app.get("/")
def root():
    return format_api_success("Visitae API is running")


@app.get("/health")
def health():
    return format_api_response({"status": "healthy"})
