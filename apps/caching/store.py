"""
Advisory cache operations over Django's cache framework.

Everything here except ``clear_prefix`` treats the cache as optional:
backend failures are logged and the caller falls back to recomputing
from the database. Vouchers, which use the cache as their system of
record, talk to the backend directly (see apps.rewards.services.vouchers).
"""

import logging
from typing import Any, Callable, Optional

from django.core.cache import cache

from .keys import build_key, generation_key, validate_prefix

logger = logging.getLogger(__name__)

_MISSING = object()


def cached_get(key: str, default: Any = None) -> Any:
    """Read a key, returning default when it is absent or the backend fails."""
    try:
        return cache.get(key, default)
    except Exception:
        logger.warning("Cache read failed for %s", key, exc_info=True)
        return default


def cached_set(key: str, value: Any, timeout: Optional[int]) -> bool:
    """Write a key with a TTL. Returns False when the backend fails."""
    try:
        cache.set(key, value, timeout)
        return True
    except Exception:
        logger.warning("Cache write failed for %s", key, exc_info=True)
        return False


def get_or_compute(
    prefix: str,
    *parts,
    compute: Callable[[], Any],
    timeout: Optional[int],
    entity=None,
) -> Any:
    """
    Return the cached value for (prefix, entity, parts), computing it on a miss.

    The computed value is written back with the given TTL. If the cache
    cannot be reached at all the value is computed and returned uncached.

    Example:
        >>> get_or_compute(
        ...     RANKING, 'overall', page, limit,
        ...     compute=lambda: _overall_page(page, limit),
        ...     timeout=300,
        ... )
    """
    try:
        key = build_key(prefix, *parts, entity=entity)
    except Exception:
        logger.warning("Cache key lookup failed for %s, computing uncached", prefix, exc_info=True)
        return compute()

    value = cached_get(key, _MISSING)
    if value is not _MISSING:
        return value

    value = compute()
    cached_set(key, value, timeout)
    return value


def _bump_generation(key: str) -> int:
    try:
        return cache.incr(key)
    except ValueError:
        # Counter never set (or evicted); start a fresh one
        if cache.add(key, 1, timeout=None):
            return 1
        return cache.incr(key)


def invalidate(prefix: str, entity=None) -> bool:
    """
    Invalidate a whole prefix, or one entity namespace within it.

    Failures are logged and reported as False; derived entries then
    expire through their TTL.
    """
    try:
        validate_prefix(prefix)
        generation = _bump_generation(generation_key(prefix, entity))
    except Exception:
        logger.warning(
            "Cache invalidation failed for %s (entity=%s)", prefix, entity, exc_info=True
        )
        return False

    logger.debug("Invalidated %s (entity=%s) -> generation %s", prefix, entity, generation)
    return True


def clear_prefix(prefix: str) -> int:
    """
    Drop every entry under a prefix. Operator affordance.

    Unlike ``invalidate`` this surfaces errors so the operator sees them.

    Returns:
        The new generation of the prefix.

    Raises:
        UnknownCachePrefixError: If prefix is not a known namespace.
    """
    validate_prefix(prefix)
    generation = _bump_generation(generation_key(prefix))
    logger.info("Cleared cache prefix %s (generation %s)", prefix, generation)
    return generation
