"""Configuration management for the catalog search service.

This module centralizes environment-driven configuration. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults. Field names match the
environment variable names case-insensitively (``catalog_log_level`` reads
``CATALOG_LOG_LEVEL``).

Usage
- Inject the appropriate config in your entrypoint:
  ``config = SearchServiceConfig()``
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseSettings):
    """Configuration shared by everything that talks to the catalog store.

    Notes
    - ``catalog_collection`` is the single collection name used for
      creation, indexing and search.
    - Add new shared settings here so the service and scripts inherit them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    catalog_env: str = Field(default="local")

    # Logging
    catalog_log_level: str = Field(default="INFO")
    catalog_log_format: str = Field(default="json")

    # Store
    catalog_store_backend: str = Field(default="opensearch")
    catalog_collection: str = Field(default="catalog")
    catalog_collection_shards: int = Field(default=1, ge=1)

    # OpenSearch
    catalog_opensearch_hosts: str = Field(default="http://localhost:9200")
    catalog_opensearch_username: Optional[str] = Field(default=None)
    catalog_opensearch_password: Optional[str] = Field(default=None)
    catalog_opensearch_verify_certs: bool = Field(default=False)
    catalog_opensearch_ssl_assert_hostname: bool = Field(default=False)
    catalog_opensearch_ssl_show_warn: bool = Field(default=False)
    catalog_opensearch_request_timeout: float = Field(default=10.0, gt=0)


class SearchServiceConfig(CatalogConfig):
    """Configuration for the HTTP search service.

    Adds the listen address and how much error detail responses carry.
    """

    catalog_search_host: str = Field(default="0.0.0.0")
    catalog_search_port: int = Field(default=4000)
    catalog_expose_error_details: bool = Field(default=True)
