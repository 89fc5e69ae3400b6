"""API subpackage for the catalog search service.

Routers expose collection creation, product indexing and search.
Transport layer remains thin and delegates to the ``CatalogStore``.
"""
