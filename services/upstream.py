"""
Outbound calls to the proxied APIs.

Every call goes through the shared pooled session with a fixed timeout.
Network errors, timeouts, non-2xx statuses and bodies that are not JSON all
surface as UpstreamError, and nothing from a failed call reaches the cache.
"""

import logging
import requests

from services import http_session

logger = logging.getLogger(__name__)

UPSTREAM_TIMEOUT = 10  # seconds

_MISSING = object()


class ProxyError(Exception):
    """Base class for errors raised while serving a proxied request."""


class UpstreamError(ProxyError):
    """An upstream call failed or returned something unusable."""

    def __init__(self, message, status_code=None, url=None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def fetch_json(url, params=None, method='GET', json=None, headers=None, timeout=UPSTREAM_TIMEOUT):
    """Call an upstream endpoint and return its parsed JSON body."""
    try:
        r = http_session.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise UpstreamError(f'Timed out after {timeout}s', url=url) from e
    except requests.RequestException as e:
        raise UpstreamError(f'Request failed: {e}', url=url) from e

    if not 200 <= r.status_code < 300:
        raise UpstreamError(f'Upstream returned HTTP {r.status_code}', status_code=r.status_code, url=url)

    try:
        return r.json()
    except ValueError as e:
        raise UpstreamError('Upstream returned malformed JSON', status_code=r.status_code, url=url) from e


def cached_fetch(cache, key, url, params=None, timeout=UPSTREAM_TIMEOUT):
    """Return the cached value for ``key``, fetching and storing it on a miss."""
    data = cache.get(key, _MISSING)
    if data is not _MISSING:
        logger.debug(f'Cache hit: {key}')
        return data

    logger.debug(f'Cache miss: {key}')
    data = fetch_json(url, params=params, timeout=timeout)
    return cache.set(key, data)
