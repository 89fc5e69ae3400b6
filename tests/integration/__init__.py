"""Integration test suite for end-to-end flows.

Runs the catalog store against a real search engine; tests skip when the
engine configured in ``CATALOG_OPENSEARCH_HOSTS`` is unreachable.
"""
