"""Tests for the catalog search service.

Unit tests exercise query construction, response decoding, the OpenSearch
adapter with a mocked client, and the HTTP routes with a fake store.
Integration tests under ``integration`` need a running engine.
"""
