"""Catalog store factory.

Centralizes creation of the concrete ``CatalogStore`` so the service and the
bootstrap tooling build the client and store the same way.
"""

from typing import Dict

import structlog

from libs.common.config import CatalogConfig

from .base import CatalogStore
from .opensearch import OpenSearchCatalogStore, create_opensearch_client

logger = structlog.get_logger("catalog_store.factory")

SUPPORTED_BACKENDS = ("opensearch",)


def create_catalog_store(config: CatalogConfig) -> CatalogStore:
    """Create a catalog store from typed configuration.

    Returns
    - A ``CatalogStore`` holding a single shared engine client
    """
    backend = config.catalog_store_backend.lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unsupported catalog store backend: {config.catalog_store_backend}")

    hosts = [host.strip() for host in config.catalog_opensearch_hosts.split(",") if host.strip()]
    if not hosts:
        raise ValueError("OpenSearch requires at least one host in CATALOG_OPENSEARCH_HOSTS")

    client = create_opensearch_client(
        hosts=hosts,
        username=config.catalog_opensearch_username,
        password=config.catalog_opensearch_password,
        verify_certs=config.catalog_opensearch_verify_certs,
        ssl_assert_hostname=config.catalog_opensearch_ssl_assert_hostname,
        ssl_show_warn=config.catalog_opensearch_ssl_show_warn,
    )

    logger.info(
        "Catalog store created",
        backend=backend,
        hosts=hosts,
        collection=config.catalog_collection
    )

    return OpenSearchCatalogStore(
        client=client,
        collection=config.catalog_collection,
        request_timeout=config.catalog_opensearch_request_timeout,
        shards=config.catalog_collection_shards,
    )


def create_catalog_store_from_env(env_config: Dict[str, str]) -> CatalogStore:
    """Create a catalog store from a flat mapping of environment variables.

    Unset keys fall back to the ``CatalogConfig`` defaults.
    """
    overrides = {
        key.lower(): value
        for key, value in env_config.items()
        if key.lower() in CatalogConfig.model_fields
    }
    return create_catalog_store(CatalogConfig(**overrides))
