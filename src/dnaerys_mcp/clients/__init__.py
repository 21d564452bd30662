"""External service client modules."""

from .store import StoreError, VariantStoreClient

__all__ = [
    "StoreError",
    "VariantStoreClient",
]
