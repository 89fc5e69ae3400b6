"""Utility scripts for operating the catalog search service.

Scripts include:
- ``catalog_bootstrap.py``: wait for the engine and create the catalog collection.
"""
