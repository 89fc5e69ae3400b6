"""Base catalog store interface.

Defines the abstract contract the search service depends on, independent of
the backing engine client.

All methods are asynchronous so an in-flight engine call is cancelled when
the request task handling it is cancelled.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Product


class CatalogStore(ABC):
    """Abstract base class for catalog stores.

    Implementations perform exactly one engine round trip per operation,
    never retry, and raise a ``CatalogStoreError`` subclass on failure.
    """

    collection: str

    @abstractmethod
    async def create_collection(self, name: Optional[str] = None) -> None:
        """Create a collection with the catalog settings and mapping.

        ``name`` defaults to the configured collection. Creating a
        collection that already exists raises ``CatalogStoreEngineError``.
        """
        pass

    @abstractmethod
    async def index_document(self, product: Optional[Product] = None) -> None:
        """Store a product in the configured collection.

        The engine-assigned document id is discarded. The document may not
        be searchable until the engine refreshes the collection.
        """
        pass

    @abstractmethod
    async def search(self, query_text: str) -> List[Product]:
        """Phrase-prefix search over name, tag and description.

        Returns
        - Products in the engine's relevance order; empty when nothing matches
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the engine answers."""
        pass

    @abstractmethod
    async def cluster_status(self) -> Optional[str]:
        """Cluster health colour (``green``, ``yellow``, ``red``).

        Returns ``None`` when the engine cannot be asked.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying client."""
        pass


class CatalogStoreError(Exception):
    """Base exception for catalog store operations."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.collection = collection

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation} failed: {self.message}"
        return self.message


class CatalogStoreConnectionError(CatalogStoreError):
    """Engine unreachable or the request timed out."""
    pass


class CatalogStoreEngineError(CatalogStoreError):
    """Engine answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_type: Optional[str] = None,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
    ):
        super().__init__(message, operation=operation, collection=collection)
        self.status_code = status_code
        self.error_type = error_type


class CatalogStoreEncodingError(CatalogStoreError):
    """Local serialization, deserialization or request construction error."""
    pass


class CatalogStoreShapeError(CatalogStoreError):
    """Engine response does not have the expected structure."""
    pass
