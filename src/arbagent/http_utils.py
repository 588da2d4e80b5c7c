"""arbagent.http_utils: HTTP GET helper with retry for read-only lookups."""

import time

import requests

from arbagent.config import log


def get_with_retry(url, *, params=None, headers=None, timeout=10,
                   retries=3, backoff=(1, 3, 8), **kwargs):
    """GET request with retry on transient network failures.

    Retries on connection errors and timeouts only.  Non-200 status codes
    are returned to the caller unchanged.

    Args:
        url: The URL to request.
        params: Query parameters.
        headers: Extra headers merged over ``Accept: application/json``.
        timeout: Request timeout in seconds.
        retries: Number of retry attempts (default 3).
        backoff: Tuple of wait times in seconds between retries.
        **kwargs: Additional kwargs passed to requests.get().

    Returns:
        The requests Response object.

    Raises:
        The last exception if all retries are exhausted.
    """
    merged_headers = {"Accept": "application/json"}
    if headers:
        merged_headers.update(headers)

    last_exc = None
    for attempt in range(1 + retries):
        try:
            return requests.get(
                url,
                params=params,
                headers=merged_headers,
                timeout=timeout,
                **kwargs,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            last_exc = exc
            if attempt < retries:
                wait = backoff[attempt] if attempt < len(backoff) else backoff[-1]
                log(f"  HTTP GET {url} failed (attempt {attempt + 1}/{1 + retries}): "
                    f"{exc}. Retrying in {wait}s...")
                time.sleep(wait)
    raise last_exc
