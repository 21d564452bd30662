"""Shared constants for dnaerys-mcp runtime defaults and limits.

This module is the single source of truth for default values that are consumed
across configuration loading, request normalization, and tool behavior.
"""

from __future__ import annotations

# Networking defaults
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 8000
DEFAULT_TRANSPORT = "stdio"
DEFAULT_RATE_LIMIT = 120  # requests per minute per client IP
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Variant store
DEFAULT_STORE_URL = "http://localhost:8001"
DEFAULT_STORE_TIMEOUT_SECONDS = 60.0
STORE_API_PREFIX = "/v1"
DEFAULT_ASSEMBLY = "GRCh38"
SUPPORTED_ASSEMBLIES = ("GRCh37", "GRCh38")

# Pagination
MAX_PAGE_SIZE = 100
DEFAULT_SKIP = 0

# Variant length bounds; the store reads this maximum as "no upper bound"
MIN_VARIANT_LENGTH = 0
UNBOUNDED_LENGTH = 2**31 - 1

# Canonical "no data" marker returned instead of an empty list
EMPTY_RESULT = "{}"

DATASET_NAME = "1000 Genomes Project"
