"""Catalog search service package.

Layout:
- ``api``: HTTP endpoints for collection, indexing and search operations.
- ``runtime``: service-local metrics helpers.
"""
