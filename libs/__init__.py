"""Shared libraries for the catalog search service.

Subpackages:
- ``libs.common``: configuration, logging and metrics.
- ``libs.catalog_store``: catalog store abstraction and the OpenSearch backend.

Notes:
- Avoid HTTP-specific logic here; routes live in the service package.
"""
