"""Tests for the search service HTTP surface with a fake store."""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from app.api.routes import get_catalog_store, get_metrics
from app.main import app
from libs.catalog_store.base import (
    CatalogStore,
    CatalogStoreConnectionError,
    CatalogStoreEngineError,
    CatalogStoreShapeError,
)
from libs.catalog_store.models import Product, SAMPLE_PRODUCT
from libs.common.config import SearchServiceConfig
from libs.common.metrics import MetricsCollector


class FakeCatalogStore(CatalogStore):
    """In-memory stand-in recording the calls the routes make."""

    def __init__(self, collection: str = "catalog"):
        self.collection = collection
        self.created: List[Optional[str]] = []
        self.indexed: List[Optional[Product]] = []
        self.queries: List[str] = []
        self.results: List[Product] = []
        self.error: Optional[Exception] = None
        self.healthy = True

    async def create_collection(self, name: Optional[str] = None) -> None:
        if self.error:
            raise self.error
        self.created.append(name)

    async def index_document(self, product: Optional[Product] = None) -> None:
        if self.error:
            raise self.error
        self.indexed.append(product)

    async def search(self, query_text: str) -> List[Product]:
        if self.error:
            raise self.error
        self.queries.append(query_text)
        return self.results

    async def health_check(self) -> bool:
        return self.healthy

    async def cluster_status(self) -> Optional[str]:
        return "green" if self.healthy else None

    async def close(self) -> None:
        pass


@pytest.fixture
def store():
    return FakeCatalogStore()


@pytest.fixture
def metrics_collector():
    return MetricsCollector("test-service", registry=CollectorRegistry())


@pytest.fixture
def client(store, metrics_collector):
    app.dependency_overrides[get_catalog_store] = lambda: store
    app.dependency_overrides[get_metrics] = lambda: metrics_collector
    app.state.catalog_store = store
    app.state.metrics_collector = metrics_collector
    yield TestClient(app)
    app.dependency_overrides.clear()
    for name in ("catalog_store", "metrics_collector", "config"):
        if hasattr(app.state, name):
            delattr(app.state, name)


def test_create_collection_with_name(client, store):
    """Test creating a named collection."""
    response = client.post("/api/v1/create", params={"index": "catalog"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert store.created == ["catalog"]


def test_create_collection_defaults_to_configured(client, store):
    """Test that an absent index parameter targets the configured collection."""
    response = client.post("/api/v1/create")

    assert response.status_code == 200
    assert store.created == [None]


def test_create_collection_forwards_empty_name(client, store):
    """Test that an empty name is passed through."""
    client.post("/api/v1/create", params={"index": ""})
    assert store.created == [""]


def test_create_collection_failure_is_plain_text_500(client, store):
    """Test mapping of engine failures to a 500 carrying the message."""
    store.error = CatalogStoreEngineError(
        "index [catalog] already exists",
        status_code=400,
        error_type="resource_already_exists_exception",
        operation="create_collection",
        collection="catalog",
    )

    response = client.post("/api/v1/create", params={"index": "catalog"})

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "create_collection failed: index [catalog] already exists"


def test_error_details_hidden_when_disabled(client, store):
    """Test that raw engine text is withheld when configured."""
    app.state.config = SearchServiceConfig(catalog_expose_error_details=False)
    store.error = CatalogStoreConnectionError("connection refused to 10.0.0.5:9200", operation="search")

    response = client.get("/api/v1/search", params={"search": "Iphone"})

    assert response.status_code == 500
    assert response.text == "Internal server error"


def test_index_without_body_uses_sample(client, store):
    """Test indexing with no body."""
    response = client.post("/api/v1/index")

    assert response.status_code == 200
    assert response.text == "Product indexed"
    assert store.indexed == [None]


def test_index_with_body(client, store):
    """Test indexing a caller-supplied product."""
    response = client.post("/api/v1/index", json=SAMPLE_PRODUCT.model_dump())

    assert response.status_code == 200
    assert store.indexed == [SAMPLE_PRODUCT]


def test_search_returns_products_in_order(client, store):
    """Test that search results are returned as a JSON list in order."""
    store.results = [SAMPLE_PRODUCT, Product(name="Iphone 13", price=800000)]

    response = client.get("/api/v1/search", params={"search": "Iphone"})

    assert response.status_code == 200
    assert store.queries == ["Iphone"]
    body = response.json()
    assert [item["name"] for item in body] == ["Iphone 14 Pro", "Iphone 13"]
    assert body[0] == SAMPLE_PRODUCT.model_dump()


def test_search_without_param_forwards_empty_string(client, store):
    """Test that a missing query is an empty query with empty results."""
    response = client.get("/api/v1/search")

    assert response.status_code == 200
    assert response.json() == []
    assert store.queries == [""]


def test_search_shape_error_is_500(client, store):
    """Test that decoding failures surface as server errors."""
    store.error = CatalogStoreShapeError("unexpected search response shape", operation="search")

    response = client.get("/api/v1/search", params={"search": "Iphone"})

    assert response.status_code == 500
    assert "unexpected search response shape" in response.text


def test_failed_request_does_not_affect_next(client, store):
    """Test that a failure is isolated to its request."""
    store.error = CatalogStoreConnectionError("refused", operation="search")
    assert client.get("/api/v1/search", params={"search": "a"}).status_code == 500

    store.error = None
    assert client.get("/api/v1/search", params={"search": "a"}).status_code == 200


def test_store_operations_are_metered(client, store, metrics_collector):
    """Test store operation metrics by outcome."""
    client.get("/api/v1/search", params={"search": "a"})
    store.error = CatalogStoreConnectionError("refused", operation="search")
    client.get("/api/v1/search", params={"search": "a"})

    metrics = metrics_collector.get_metrics()
    assert 'catalog_store_operations_total{operation="search",outcome="success"} 1.0' in metrics
    assert (
        'catalog_store_operations_total{operation="search",outcome="CatalogStoreConnectionError"} 1.0'
        in metrics
    )


def test_health(client, store):
    """Test health endpoint."""
    assert client.get("/health").status_code == 200

    store.healthy = False
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_metrics_endpoint(client):
    """Test Prometheus exposition."""
    client.get("/")
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["search"] == "/api/v1/search"
