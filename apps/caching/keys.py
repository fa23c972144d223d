"""
Cache key scheme for derived views.

Every key lives under one of the known prefixes and embeds the current
generation of its namespace. A namespace is either a whole prefix
(``ranking``) or a prefix plus entity (``dashboard`` + restaurant id).
Bumping a generation makes every key built under the old value
unreachable, so invalidation never has to scan the keyspace; stale
entries simply age out through their TTL.

Key layout::

    <prefix>:g<prefix generation>[:<entity>:g<entity generation>]:<part>:<part>...

Example:
    >>> build_key(RANKING, 'overall', 1, 20)
    'ranking:g0:overall:1:20'
    >>> build_key(DASHBOARD, 'daily', entity=restaurant_id)
    'dashboard:g3:7f0c...:g1:daily'
"""

from datetime import date, datetime
from urllib.parse import quote

from django.core.cache import cache

from .exceptions import UnknownCachePrefixError


RANKING = 'ranking'
DASHBOARD = 'dashboard'
ELIGIBILITY = 'eligibility'
VOUCHER = 'voucher'

PREFIXES = (RANKING, DASHBOARD, ELIGIBILITY, VOUCHER)

# Vouchers have no other store, so operators may only clear derived views
CLEARABLE_PREFIXES = (RANKING, DASHBOARD, ELIGIBILITY)


def validate_prefix(prefix: str) -> str:
    """Return the prefix unchanged, or raise if it is not a known namespace."""
    if prefix not in PREFIXES:
        raise UnknownCachePrefixError(
            f"Unknown cache prefix '{prefix}'. Valid options: {', '.join(PREFIXES)}"
        )
    return prefix


def generation_key(prefix: str, entity=None) -> str:
    """Key holding the generation counter of a prefix or prefix+entity namespace."""
    if entity is None:
        return f'gen:{prefix}'
    return f'gen:{prefix}:{normalize_part(entity)}'


def normalize_part(value) -> str:
    """Render a key component as a backend-safe string."""
    if value is None:
        return '-'
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, float):
        return repr(round(value, 6))
    # Country names and free-form filters may carry spaces
    return quote(str(value), safe='')


def current_generations(prefix: str, entity=None) -> tuple:
    """Read the generation counters for a namespace in one round trip."""
    prefix_key = generation_key(prefix)
    if entity is None:
        return (cache.get(prefix_key, 0),)

    entity_key = generation_key(prefix, entity)
    values = cache.get_many([prefix_key, entity_key])
    return (values.get(prefix_key, 0), values.get(entity_key, 0))


def build_key(prefix: str, *parts, entity=None) -> str:
    """
    Build a cache key embedding the current namespace generations.

    Args:
        prefix: One of PREFIXES.
        *parts: Filter / pagination components identifying the entry.
        entity: Optional entity id (restaurant, user) scoping the entry.

    Returns:
        The fully qualified cache key.

    Raises:
        UnknownCachePrefixError: If prefix is not a known namespace.
    """
    validate_prefix(prefix)
    generations = current_generations(prefix, entity)

    segments = [prefix, f'g{generations[0]}']
    if entity is not None:
        segments.extend([normalize_part(entity), f'g{generations[1]}'])
    segments.extend(normalize_part(part) for part in parts)
    return ':'.join(segments)
