"""Main FastAPI application"""
import logging
import logging.config
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from starlette.middleware.base import BaseHTTPMiddleware

from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config import Settings, get_settings
from routes import router as api_router
from utils.error_handlers import register_error_handlers


def build_logging_config(level: str = "INFO") -> dict:
    """Unified logging configuration with Rich for the app and uvicorn loggers."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                # RichHandler renders time and level itself
                "format": "%(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "class": "rich.logging.RichHandler",
                "formatter": "default",
                "level": "DEBUG",
                "rich_tracebacks": True,
                "show_time": True,
                "show_path": False,
                "log_time_format": "%Y-%m-%d %H:%M:%S",
                "markup": False,
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "": { # Root logger for our application
                "handlers": ["default"],
                "level": level,
                "propagate": False,
            },
        },
    }


logger = logging.getLogger(__name__)


# --- Middleware for Request Body Size Limit ---
class LimitBodySizeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_body_size: int):
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next):
        content_length_header = request.headers.get("content-length")
        if content_length_header:
            try:
                content_length = int(content_length_header)
            except ValueError:
                logger.warning("Request rejected: Invalid Content-Length header.")
                return JSONResponse({"error": "Invalid Content-Length header."}, status_code=400)
            if content_length > self.max_body_size:
                logger.warning(f"Request rejected: body size {content_length} exceeds limit {self.max_body_size}.")
                return JSONResponse(
                    {"error": f"Maximum request body size ({self.max_body_size} bytes) exceeded."},
                    status_code=413,
                )
        return await call_next(request)


def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: Connect to MongoDB. A failed ping aborts startup.
        logger.info(f"Connecting to MongoDB database '{settings.db_name}'...")
        client = AsyncIOMotorClient(settings.mongo_uri, tz_aware=True)
        try:
            await client.admin.command('ping')
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            client.close()
            raise RuntimeError("MongoDB connection failed") from e
        logger.info("MongoDB ping successful.")

        app.state.db_client = client
        app.state.transactions_collection = client[settings.db_name].get_collection(settings.collection_name)
        try:
            yield # Application runs here
        finally:
            # Shutdown: Close MongoDB connection
            logger.info("Closing MongoDB connection...")
            app.state.transactions_collection = None
            client.close()
            logger.info("MongoDB connection closed.")

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings.log_level))

    app = FastAPI(
        title="Transactions API",
        description="CRUD API for income and expense transactions.",
        version="0.1.0",
        lifespan=build_lifespan(settings),
    )
    app.state.transactions_collection = None

    # --- Rate Limiter Setup ---
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit] if settings.rate_limit_enabled else [],
        enabled=settings.rate_limit_enabled,
    )
    app.state.limiter = limiter
    register_error_handlers(app)

    # --- Middleware (added last runs first) ---
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(LimitBodySizeMiddleware, max_body_size=settings.max_body_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Logs every request with its outcome and duration."""
        started = time.perf_counter()
        logger.debug(f"Headers: {dict(request.headers)}")
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"{request.method} {request.url.path} -> unhandled error ({elapsed_ms:.1f} ms)")
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
        return response

    app.include_router(api_router, tags=["transactions"])
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
