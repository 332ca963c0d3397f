"""
Path-keyed page cache and its invalidation capability.

Dashboard views are cached under ``page:{path}`` (or ``page:{path}:{variant}``
for per-user variants). Mutations never touch Redis directly; they call an
injected ``CacheInvalidator`` with the paths whose output is now stale.
"""

import logging
from typing import Optional, Protocol, Sequence

from smartmed.core.config import get_settings
from smartmed.core.redis import (
    cache_delete,
    cache_delete_pattern,
    cache_get,
    cache_set,
)

logger = logging.getLogger(__name__)

PAGE_CACHE_PREFIX = "page:"


def page_cache_key(path: str, variant: str | None = None) -> str:
    key = f"{PAGE_CACHE_PREFIX}{path}"
    if variant:
        key = f"{key}:{variant}"
    return key


def dashboard_path() -> str:
    return "/dashboard"


def patient_path(patient_id) -> str:
    return f"/dashboard/patients/{patient_id}"


def patient_readings_path(patient_id) -> str:
    return f"/dashboard/patients/{patient_id}/readings"


def patient_reading_path(patient_id, reading_id) -> str:
    return f"/dashboard/patients/{patient_id}/readings/{reading_id}"


def patient_reports_path(patient_id) -> str:
    return f"/dashboard/patients/{patient_id}/reports"


def reading_display_paths(patient_id) -> list[str]:
    """Paths whose output depends on a patient's readings."""
    return [
        patient_path(patient_id),
        patient_readings_path(patient_id),
        dashboard_path(),
    ]


class CacheInvalidator(Protocol):
    def invalidate(self, paths: Sequence[str]) -> None: ...


class RedisPageInvalidator:
    """Drops cached page output from Redis. No-op in degraded mode."""

    def invalidate(self, paths: Sequence[str]) -> None:
        for path in paths:
            cache_delete(page_cache_key(path))
            cache_delete_pattern(f"{page_cache_key(path)}:*")
            logger.debug("Invalidated page cache for %s", path)


def get_cache_invalidator() -> CacheInvalidator:
    """
    FastAPI dependency for the invalidation capability.
    Tests override this to record invalidated paths.
    """
    return RedisPageInvalidator()


def get_cached_page(path: str, variant: str | None = None) -> Optional[str]:
    return cache_get(page_cache_key(path, variant))


def set_cached_page(path: str, value: str, variant: str | None = None) -> bool:
    return cache_set(
        page_cache_key(path, variant),
        value,
        ttl=get_settings().page_cache_ttl_seconds,
    )
