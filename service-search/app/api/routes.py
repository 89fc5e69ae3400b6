"""API routes for the catalog search service."""

import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import PlainTextResponse
import structlog

from libs.catalog_store.base import CatalogStore, CatalogStoreError
from libs.catalog_store.models import Product
from libs.common.logging import log_performance
from libs.common.metrics import MetricsCollector

logger = structlog.get_logger("search_service.api")

router = APIRouter()


def get_catalog_store(request: Request) -> CatalogStore:
    """Get the shared catalog store from application state."""
    return request.app.state.catalog_store


def get_metrics(request: Request) -> MetricsCollector:
    """Get metrics collector from application state."""
    return request.app.state.metrics_collector


@contextmanager
def track_store_operation(metrics_collector: MetricsCollector, operation: str) -> Iterator[None]:
    """Record duration and outcome of one store call."""
    start_time = time.time()
    outcome = "success"
    try:
        yield
    except CatalogStoreError as e:
        outcome = type(e).__name__
        raise
    finally:
        metrics_collector.record_store_operation(operation, outcome, time.time() - start_time)


@router.post("/create", response_class=PlainTextResponse)
async def create_collection(
    index: Optional[str] = Query(None, description="Collection name; defaults to the configured collection"),
    store: CatalogStore = Depends(get_catalog_store),
    metrics_collector: MetricsCollector = Depends(get_metrics)
):
    """Create a collection."""
    with track_store_operation(metrics_collector, "create_collection"):
        await store.create_collection(index)

    return f"Collection {store.collection if index is None else index!r} created"


@router.post("/index", response_class=PlainTextResponse)
async def index_product(
    product: Optional[Product] = Body(None, description="Product to index; defaults to the sample product"),
    store: CatalogStore = Depends(get_catalog_store),
    metrics_collector: MetricsCollector = Depends(get_metrics)
):
    """Index a product into the configured collection."""
    with track_store_operation(metrics_collector, "index_document"):
        await store.index_document(product)

    return "Product indexed"


@router.get("/search", response_model=List[Product])
async def search(
    search: str = Query("", description="Free-text query"),
    store: CatalogStore = Depends(get_catalog_store),
    metrics_collector: MetricsCollector = Depends(get_metrics)
):
    """Phrase-prefix search over the catalog."""
    start_time = time.time()

    with track_store_operation(metrics_collector, "search"):
        products = await store.search(search)

    metrics_collector.record_search_results(len(products))
    log_performance(
        "search",
        (time.time() - start_time) * 1000,
        collection=store.collection,
        results_count=len(products)
    )

    return products
