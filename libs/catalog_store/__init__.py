"""Catalog store adapters and utilities.

Primary components:
- ``models``: the ``Product`` record and the search response envelope.
- ``queries``: collection settings, search query construction and decoding.
- ``base``: abstract ``CatalogStore`` interface and the error taxonomy.
- ``opensearch``: OpenSearch/Elasticsearch implementation of the interface.
- ``factory``: helpers to construct a store from typed config or env.

Guidance:
- Build one store at process startup and share it; the underlying client
  is safe to use from concurrent request handlers.
"""
