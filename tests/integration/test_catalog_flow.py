"""Integration tests against a running OpenSearch/Elasticsearch engine.

Point ``CATALOG_OPENSEARCH_HOSTS`` at a disposable cluster; the tests skip
when nothing answers.
"""

import uuid

import pytest
import pytest_asyncio

from libs.catalog_store.base import CatalogStoreEngineError
from libs.catalog_store.factory import create_catalog_store
from libs.catalog_store.models import Product, SAMPLE_PRODUCT
from libs.common.config import CatalogConfig


@pytest_asyncio.fixture
async def store():
    """Store bound to a throwaway collection, removed afterwards."""
    collection = f"catalog-test-{uuid.uuid4().hex[:12]}"
    store = create_catalog_store(CatalogConfig(catalog_collection=collection))
    if not await store.health_check():
        await store.close()
        pytest.skip("Search engine not available")

    yield store

    await store.client.indices.delete(index=collection, ignore=[400, 404])
    await store.close()


async def _refresh(store):
    """Make indexed documents visible to search."""
    await store.client.indices.refresh(index=store.collection)


@pytest.mark.integration
class TestCatalogFlow:
    """End-to-end behaviour of the catalog store."""

    @pytest.mark.asyncio
    async def test_create_collection_twice(self, store):
        """Second creation fails with an engine-reported error."""
        await store.create_collection()

        with pytest.raises(CatalogStoreEngineError) as excinfo:
            await store.create_collection()

        assert excinfo.value.error_type == "resource_already_exists_exception"

    @pytest.mark.asyncio
    async def test_search_fresh_collection_is_empty(self, store):
        """Searching an empty collection is an empty success."""
        await store.create_collection()

        assert await store.search("Iphone") == []
        assert await store.search("") == []

    @pytest.mark.asyncio
    async def test_catalog_scenario(self, store):
        """Create, index the sample product and find it by name prefix."""
        await store.create_collection()
        await store.index_document(SAMPLE_PRODUCT)
        await _refresh(store)

        products = await store.search("Iphone")

        assert len(products) >= 1
        assert products[0].name == "Iphone 14 Pro"
        assert products[0] == SAMPLE_PRODUCT

    @pytest.mark.asyncio
    async def test_search_by_name_substring(self, store):
        """An indexed product is found by a phrase prefix of its name."""
        product = Product(name="Galaxy Tab S9", price=750000, tag="Tablet", description="Android tablet")
        await store.create_collection()
        await store.index_document(product)
        await _refresh(store)

        assert product in await store.search("Galaxy Ta")

    @pytest.mark.asyncio
    async def test_result_order_matches_engine_order(self, store):
        """Decoded products follow the engine's relevance order."""
        await store.create_collection()
        await store.index_document(Product(name="Iphone", tag="Iphone", description="Iphone Iphone"))
        await store.index_document(Product(name="Case for Iphone", tag="Accessory", description="Leather"))
        await store.index_document(Product(name="Iphone 13", tag="Smartphone", description="Iphone"))
        await _refresh(store)

        raw = await store.client.search(
            index=store.collection,
            body={"query": {"multi_match": {
                "query": "Iphone",
                "type": "phrase_prefix",
                "fields": ["name", "tag", "description"],
            }}},
        )
        expected = [hit["_source"]["name"] for hit in raw["hits"]["hits"]]
        scores = [hit["_score"] for hit in raw["hits"]["hits"]]

        products = await store.search("Iphone")

        assert len(products) >= 2
        assert len(set(scores)) > 1
        assert [p.name for p in products] == expected

    @pytest.mark.asyncio
    async def test_search_missing_collection(self, store):
        """Searching a collection that does not exist is an engine error."""
        with pytest.raises(CatalogStoreEngineError) as excinfo:
            await store.search("Iphone")

        assert excinfo.value.status_code == 404
