#!/usr/bin/env python3
"""Bootstrap script for the catalog search service.

Waits for the cluster to turn green or yellow, creates the catalog
collection and optionally seeds it with the sample product.
"""

import argparse
import asyncio
import sys
import time
from typing import Optional

import structlog

from libs.catalog_store.base import CatalogStore, CatalogStoreEngineError
from libs.catalog_store.factory import create_catalog_store
from libs.catalog_store.models import SAMPLE_PRODUCT
from libs.common.config import CatalogConfig
from libs.common.logging import configure_logging

logger = structlog.get_logger("catalog_bootstrap")

ALREADY_EXISTS_ERROR = "resource_already_exists_exception"

READY_STATUSES = ("green", "yellow")


async def wait_for_cluster(store: CatalogStore, timeout: float = 60, interval: float = 5) -> None:
    """Wait for the cluster to report green or yellow health."""
    start_time = time.time()

    while time.time() - start_time < timeout:
        status = await store.cluster_status()
        if status in READY_STATUSES:
            logger.info("Search engine cluster is ready", status=status)
            return
        logger.info("Waiting for search engine cluster", status=status, interval=interval)
        await asyncio.sleep(interval)

    raise TimeoutError("Search engine cluster did not become ready within timeout")


async def ensure_collection(store: CatalogStore, name: Optional[str] = None) -> bool:
    """Create the collection, treating an existing one as done.

    Returns ``True`` when the collection was created by this call.
    """
    try:
        await store.create_collection(name)
    except CatalogStoreEngineError as e:
        if e.error_type != ALREADY_EXISTS_ERROR:
            raise
        logger.info("Collection already exists", collection=e.collection)
        return False
    return True


async def bootstrap(
    store: CatalogStore,
    collection: Optional[str] = None,
    seed_sample: bool = False,
    wait_timeout: float = 60,
) -> None:
    """Run the bootstrap steps against ``store``."""
    await wait_for_cluster(store, wait_timeout)
    await ensure_collection(store, collection)

    if seed_sample:
        await store.index_document(SAMPLE_PRODUCT)
        logger.info("Sample product indexed", product_name=SAMPLE_PRODUCT.name)


async def _run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.hosts is not None:
        overrides["catalog_opensearch_hosts"] = args.hosts
    if args.collection:
        overrides["catalog_collection"] = args.collection
    config = CatalogConfig(**overrides)
    configure_logging("catalog-bootstrap", config.catalog_log_level, "console")

    store: Optional[CatalogStore] = None
    try:
        store = create_catalog_store(config)
        await bootstrap(store, seed_sample=args.seed_sample, wait_timeout=args.wait_timeout)
        logger.info("Catalog bootstrap completed successfully", collection=store.collection)
        return 0
    except Exception as e:
        logger.error("Catalog bootstrap failed", error=str(e))
        return 1
    finally:
        if store is not None:
            await store.close()


def main():
    """Main bootstrap function."""
    parser = argparse.ArgumentParser(description="Bootstrap the catalog collection")
    parser.add_argument("--hosts", help="Search engine hosts (comma-separated); defaults to CATALOG_OPENSEARCH_HOSTS")
    parser.add_argument("--collection", help="Collection name; defaults to CATALOG_COLLECTION")
    parser.add_argument("--seed-sample", action="store_true", help="Index the sample product after creation")
    parser.add_argument("--wait-timeout", type=float, default=60, help="Engine wait timeout in seconds")

    args = parser.parse_args()
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
