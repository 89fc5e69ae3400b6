"""OpenSearch catalog store implementation.

Works against any engine speaking the OpenSearch/Elasticsearch search API.
"""

import time
from typing import Any, Dict, List, Optional

import structlog
from opensearchpy import AsyncOpenSearch, exceptions

from .base import (
    CatalogStore,
    CatalogStoreConnectionError,
    CatalogStoreEncodingError,
    CatalogStoreEngineError,
    CatalogStoreError,
)
from .models import Product, SAMPLE_PRODUCT
from .queries import build_collection_body, build_search_body, decode_search_response

logger = structlog.get_logger("catalog_store.opensearch")


def create_opensearch_client(
    hosts: List[str],
    username: Optional[str] = None,
    password: Optional[str] = None,
    verify_certs: bool = False,
    ssl_assert_hostname: bool = False,
    ssl_show_warn: bool = False,
) -> AsyncOpenSearch:
    """Create the async OpenSearch client shared by the whole process."""
    return AsyncOpenSearch(
        hosts=hosts,
        http_auth=(username, password) if username and password else None,
        verify_certs=verify_certs,
        ssl_assert_hostname=ssl_assert_hostname,
        ssl_show_warn=ssl_show_warn,
        use_ssl=True if hosts[0].startswith('https') else False,
    )


def translate_error(
    error: Exception,
    operation: str,
    collection: Optional[str]
) -> CatalogStoreError:
    """Map a client exception onto the catalog error taxonomy."""
    # ConnectionError subclasses TransportError, so it must be checked first.
    if isinstance(error, exceptions.ConnectionError):
        return CatalogStoreConnectionError(
            f"search engine unreachable: {error}",
            operation=operation,
            collection=collection,
        )
    if isinstance(error, exceptions.TransportError):
        status_code = error.status_code if isinstance(error.status_code, int) else None
        return CatalogStoreEngineError(
            str(error),
            status_code=status_code,
            error_type=error.error,
            operation=operation,
            collection=collection,
        )
    if isinstance(error, (exceptions.SerializationError, ValueError, TypeError)):
        return CatalogStoreEncodingError(
            str(error),
            operation=operation,
            collection=collection,
        )
    return CatalogStoreError(str(error), operation=operation, collection=collection)


class OpenSearchCatalogStore(CatalogStore):
    """OpenSearch-based catalog store.

    One instance wraps one long-lived client and one configured collection.
    Every operation is a single request bounded by ``request_timeout``.
    """

    def __init__(
        self,
        client: AsyncOpenSearch,
        collection: str = "catalog",
        request_timeout: float = 10.0,
        shards: int = 1,
    ):
        """Initialize OpenSearch catalog store.

        Args:
            client: Shared async OpenSearch client
            collection: Collection used for indexing and search, and the
                default target of collection creation
            request_timeout: Deadline in seconds applied to every engine call
            shards: Number of primary shards for new collections
        """
        self.client = client
        self.collection = collection
        self.request_timeout = request_timeout
        self.shards = shards

    async def create_collection(self, name: Optional[str] = None) -> None:
        """Create a collection with the product mapping."""
        target = self.collection if name is None else name
        start_time = time.time()

        body = build_collection_body(self.shards)
        try:
            if target == "":
                # The client refuses an empty index name locally; send it
                # anyway so the engine's own answer is reported.
                await self.client.transport.perform_request(
                    "PUT",
                    "/",
                    params={"request_timeout": self.request_timeout},
                    body=body,
                )
            else:
                await self.client.indices.create(
                    index=target,
                    body=body,
                    request_timeout=self.request_timeout,
                )
        except exceptions.OpenSearchException as e:
            error = translate_error(e, "create_collection", target)
            logger.error(
                "Failed to create collection",
                collection=target,
                error_kind=type(error).__name__,
                error=str(e)
            )
            raise error from e

        logger.info(
            "Collection created",
            collection=target,
            shards=self.shards,
            duration_ms=(time.time() - start_time) * 1000
        )

    async def index_document(self, product: Optional[Product] = None) -> None:
        """Store a product; defaults to the sample product."""
        if product is None:
            product = SAMPLE_PRODUCT
        start_time = time.time()

        try:
            await self.client.index(
                index=self.collection,
                body=product.model_dump(),
                request_timeout=self.request_timeout,
            )
        except (exceptions.OpenSearchException, ValueError, TypeError) as e:
            error = translate_error(e, "index_document", self.collection)
            logger.error(
                "Failed to index product",
                collection=self.collection,
                product_name=product.name,
                error_kind=type(error).__name__,
                error=str(e)
            )
            raise error from e

        logger.info(
            "Product indexed",
            collection=self.collection,
            product_name=product.name,
            duration_ms=(time.time() - start_time) * 1000
        )

    async def search(self, query_text: str) -> List[Product]:
        """Phrase-prefix search across name, tag and description."""
        start_time = time.time()

        try:
            response = await self.client.search(
                index=self.collection,
                body=build_search_body(query_text),
                track_total_hits=True,
                request_timeout=self.request_timeout,
            )
        except (exceptions.OpenSearchException, ValueError) as e:
            error = translate_error(e, "search", self.collection)
            logger.error(
                "Catalog search failed",
                collection=self.collection,
                query=query_text,
                error_kind=type(error).__name__,
                error=str(e)
            )
            raise error from e

        try:
            products = decode_search_response(response)
        except CatalogStoreError as e:
            e.operation = "search"
            e.collection = self.collection
            logger.error(
                "Failed to decode search response",
                collection=self.collection,
                query=query_text,
                error_kind=type(e).__name__,
                error=e.message
            )
            raise

        logger.info(
            "Catalog search completed",
            collection=self.collection,
            query=query_text,
            results_count=len(products),
            total_hits=_total_hits(response),
            duration_ms=(time.time() - start_time) * 1000
        )

        return products

    async def health_check(self) -> bool:
        """Ping the engine."""
        try:
            return bool(await self.client.ping(request_timeout=self.request_timeout))
        except exceptions.OpenSearchException as e:
            logger.warning("Search engine health check failed", error=str(e))
            return False

    async def cluster_status(self) -> Optional[str]:
        """Report the cluster health colour."""
        try:
            health = await self.client.cluster.health(request_timeout=self.request_timeout)
        except exceptions.OpenSearchException as e:
            logger.warning("Failed to check cluster health", error=str(e))
            return None
        return health.get("status")

    async def close(self) -> None:
        """Close the OpenSearch client connection."""
        await self.client.close()
        logger.info("OpenSearch client connection closed")


def _total_hits(response: Dict[str, Any]) -> Optional[int]:
    total = response.get("hits", {}).get("total")
    if isinstance(total, dict):
        return total.get("value")
    return total
