"""Context caching: builder, handle and wire models."""

from .builder import CacheBuilder
from .handle import CachedContentHandle
from .model import (
    CachedContent,
    CacheExpiration,
    CacheUsageMetadata,
    CreateCachedContentRequest,
    ListCachedContentsResponse,
    normalize_cache_name,
)

__all__ = [
    "CacheBuilder",
    "CacheExpiration",
    "CacheUsageMetadata",
    "CachedContent",
    "CachedContentHandle",
    "CreateCachedContentRequest",
    "ListCachedContentsResponse",
    "normalize_cache_name",
]
