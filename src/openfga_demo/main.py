from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from openfga_demo import __version__
from openfga_demo.api.routes import health, listing, resources
from openfga_demo.authz.client import AuthzError, close_client, ensure_store_and_model
from openfga_demo.core.config import settings
from openfga_demo.core.logging import get_logger, setup_logging
from openfga_demo.core.middleware import RequestIDMiddleware, RequestLoggingMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info(
        "Starting application",
        service=settings.SERVICE_NAME,
        profile=settings.PROFILE,
        env=settings.ENVIRONMENT,
    )

    try:
        await ensure_store_and_model()
        logger.info("OpenFGA initialized")
    except AuthzError as e:
        logger.warning("OpenFGA initialization failed (may not be running)", error=e.message)

    yield

    logger.info("Shutting down application")
    await close_client()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.SERVICE_NAME,
        description="Resource API authorized by OpenFGA relationship tuples",
        version=__version__,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # First added = last executed
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "X-User-Id", "X-Request-ID"],
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(resources.router)
    app.include_router(listing.router)

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    logger.info("Server listening", host=settings.HOST, port=settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
