import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from flask import current_app, has_app_context

# In-memory cache for catalog lookup lists (brands, categories)
# Structure: { key: (timestamp, data) }
_CATALOG_CACHE: Dict[str, Tuple[float, Any]] = {}
_CATALOG_CACHE_LOCK = threading.Lock()
CATALOG_CACHE_TTL_SECONDS = 1800
CATALOG_CACHE_MAX = 50


def _ttl() -> int:
    if has_app_context():
        return int(current_app.config.get('CATALOG_CACHE_TTL', CATALOG_CACHE_TTL_SECONDS))
    return CATALOG_CACHE_TTL_SECONDS


def get_cached(key: str, loader: Callable[[], Any], ttl: Optional[int] = None) -> Any:
    """Return cached data for key, calling loader when missing or expired. ttl=0 disables caching."""
    ttl = _ttl() if ttl is None else ttl
    now = time.time()
    if ttl > 0:
        with _CATALOG_CACHE_LOCK:
            cached = _CATALOG_CACHE.get(key)
            if cached:
                ts, data = cached
                if (now - ts) <= ttl:
                    # Callers must treat this as read-only.
                    return data
                _CATALOG_CACHE.pop(key, None)

    data = loader()

    if ttl > 0:
        with _CATALOG_CACHE_LOCK:
            if len(_CATALOG_CACHE) >= CATALOG_CACHE_MAX:
                oldest_key = min(_CATALOG_CACHE.items(), key=lambda item: item[1][0])[0]
                _CATALOG_CACHE.pop(oldest_key, None)
            _CATALOG_CACHE[key] = (now, data)
    return data


def invalidate(prefix: Optional[str] = None):
    with _CATALOG_CACHE_LOCK:
        if prefix is None:
            _CATALOG_CACHE.clear()
            return
        for key in [k for k in _CATALOG_CACHE if k.startswith(prefix)]:
            _CATALOG_CACHE.pop(key, None)
