"""Domain exceptions for caching app."""


class CachingError(Exception):
    """Base exception for all cache layer errors."""
    pass


class UnknownCachePrefixError(CachingError):
    """Prefix is not one of the known cache namespaces."""
    pass
