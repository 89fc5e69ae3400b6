"""Common utilities shared by the service and scripts.

Includes:
- ``config``: pydantic-settings configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers.

Import pattern:
- from libs.common.config import SearchServiceConfig
- from libs.common.logging import configure_logging
"""
