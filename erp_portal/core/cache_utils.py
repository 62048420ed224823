"""
Caching for tenant settings, grid layouts and dashboard payloads
Redis (django-redis) when REDIS_URL is set, local memory otherwise
"""
import hashlib
import logging

from django.core.cache import cache

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
TENANT_SETTINGS_CACHE_TTL = 600  # 10 minutes
DASHBOARD_CACHE_TTL = 300  # 5 minutes
GRID_LAYOUT_CACHE_TTL = 600  # 10 minutes


def make_cache_key(prefix, *args, **kwargs):
    """Stable key for a prefix and its arguments; the prefix stays readable for pattern deletes"""
    raw = f"{prefix}:{args}:{sorted(kwargs.items())}"
    return f"{prefix}:{hashlib.md5(raw.encode()).hexdigest()}"


def invalidate_cache_pattern(pattern):
    """
    Delete every key containing ``pattern``.
    Only django-redis supports this; other backends are left untouched.
    """
    delete_pattern = getattr(cache, 'delete_pattern', None)
    if delete_pattern is None:
        logger.warning(f"Cache backend cannot delete by pattern, skipped: {pattern}")
        return 0

    deleted = delete_pattern(f"*{pattern}*")
    logger.info(f"Invalidated {deleted} cache keys matching pattern: {pattern}")
    return deleted


def get_cached_dashboard_data(name, filters_dict):
    """
    Get cached dashboard payload for a route and its filters
    Returns tuple: (cached_data, cache_key)
    """
    cache_key = make_cache_key(f"dashboard_{name}", **filters_dict)
    return cache.get(cache_key), cache_key


def cache_dashboard_data(cache_key, data, ttl=DASHBOARD_CACHE_TTL):
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached dashboard data: {cache_key}")


def grid_layout_cache_key(user_id, company_id, module_id, transaction_id, grid_name):
    return make_cache_key("grid_layout", str(user_id), str(company_id), str(module_id), str(transaction_id), grid_name)


def invalidate_grid_layout(user_id, company_id, module_id, transaction_id, grid_name):
    """Drop one cached grid layout"""
    cache.delete(grid_layout_cache_key(user_id, company_id, module_id, transaction_id, grid_name))


def invalidate_dashboard_cache():
    invalidate_cache_pattern("dashboard_")
    logger.info("Invalidated dashboard cache")


def invalidate_tenant_settings_cache():
    """Invalidate decimals, mandatory and visible field settings"""
    for prefix in ("tenant_decimals", "tenant_mandatory", "tenant_visible"):
        invalidate_cache_pattern(prefix)
    logger.info("Invalidated tenant settings cache")
