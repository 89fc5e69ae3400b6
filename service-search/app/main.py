"""Catalog search service main application."""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import structlog

from .api.routes import router as api_router
from .runtime.metrics import get_metrics_collector
from libs.catalog_store.base import CatalogStoreError
from libs.catalog_store.factory import create_catalog_store
from libs.common.config import SearchServiceConfig
from libs.common.logging import configure_logging

logger = structlog.get_logger("search_service")

GENERIC_ERROR_MESSAGE = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    config = SearchServiceConfig()
    configure_logging("search-service", config.catalog_log_level, config.catalog_log_format)
    app.state.config = config

    logger.info("Starting search service", collection=config.catalog_collection)

    # One engine client for the whole process
    app.state.catalog_store = create_catalog_store(config)
    app.state.metrics_collector = get_metrics_collector("search-service")

    logger.info("Search service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down search service")
    await app.state.catalog_store.close()
    logger.info("Search service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Catalog Search Service",
    description="Product catalog indexing and phrase-prefix search",
    version="0.1.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(CatalogStoreError)
async def catalog_store_error_handler(request: Request, exc: CatalogStoreError):
    """Map any store failure to a plain-text 500."""
    config = getattr(request.app.state, "config", None)
    expose_details = config.catalog_expose_error_details if config is not None else True

    logger.error(
        "Catalog store request failed",
        path=request.url.path,
        operation=exc.operation,
        collection=exc.collection,
        error_kind=type(exc).__name__,
        error=str(exc)
    )

    message = str(exc) if expose_details else GENERIC_ERROR_MESSAGE
    return PlainTextResponse(message, status_code=500)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Collect metrics for HTTP requests."""
    start_time = time.time()

    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as e:
        logger.exception("Unhandled error", path=request.url.path, error=str(e))
        status_code = 500
        response = PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)

    duration = time.time() - start_time

    # Record metrics
    if hasattr(app.state, 'metrics_collector'):
        app.state.metrics_collector.record_http_request(
            method=request.method,
            endpoint=request.url.path,
            status=status_code,
            duration=duration
        )

    return response


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    if hasattr(app.state, 'catalog_store'):
        engine_health = await app.state.catalog_store.health_check()
    else:
        engine_health = False

    if engine_health:
        return {"status": "healthy", "service": "search-service"}
    return JSONResponse(
        status_code=503,
        content={"status": "unhealthy", "service": "search-service"}
    )


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    if hasattr(app.state, 'metrics_collector'):
        metrics_data = app.state.metrics_collector.get_metrics()
        return Response(content=metrics_data, media_type="text/plain")
    else:
        return Response(content="# No metrics available\n", media_type="text/plain")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "search-service",
        "version": "0.1.0",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "metrics": "/metrics",
            "create": "/api/v1/create",
            "index": "/api/v1/index",
            "search": "/api/v1/search"
        }
    }


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    config = SearchServiceConfig()
    uvicorn.run(
        "app.main:app",
        host=config.catalog_search_host,
        port=config.catalog_search_port,
        log_level=config.catalog_log_level.lower()
    )


if __name__ == "__main__":
    run()
