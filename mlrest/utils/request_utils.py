import os
from functools import lru_cache

import requests
from requests.adapters import HTTPAdapter


@lru_cache(maxsize=64)
def _cached_get_request_session(
    pool_connections,
    pool_maxsize,
    # To create a new Session object for each process, we use the process id as the cache key.
    # This is to avoid sharing the same Session object across processes, which can lead to issues
    # such as https://stackoverflow.com/q/3724900.
    _pid,
):
    """
    This function should not be called directly. Instead, use `_get_request_session` below.
    """
    # max_retries=0: every call is exactly one request, failures surface to the caller.
    adapter = HTTPAdapter(
        pool_connections=pool_connections,
        pool_maxsize=pool_maxsize,
        max_retries=0,
    )
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _get_request_session():
    """Returns a `Requests.Session` object for making an HTTP request.

    The session is shared by every client in the process; its connection pools are sized by
    ``MLREST_HTTP_POOL_CONNECTIONS`` and ``MLREST_HTTP_POOL_MAXSIZE``.

    Returns:
        requests.Session object.
    """
    from mlrest.environment_variables import (
        MLREST_HTTP_POOL_CONNECTIONS,
        MLREST_HTTP_POOL_MAXSIZE,
    )

    return _cached_get_request_session(
        MLREST_HTTP_POOL_CONNECTIONS.get(),
        MLREST_HTTP_POOL_MAXSIZE.get(),
        _pid=os.getpid(),
    )


def _get_http_response(method, url, **kwargs):
    """Performs an HTTP request using the shared session.

    Args:
        method: a string indicating the method to use, e.g. "GET", "POST", "PUT".
        url: the target URL address for the HTTP request.
        kwargs: Additional keyword arguments to pass to `requests.Session.request()`

    Returns:
        requests.Response object.
    """
    session = _get_request_session()
    return session.request(method, url, **kwargs)
