from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import REQUEST_HEADERS, RETRY_ATTEMPTS, RETRY_BACKOFF


def create_session() -> requests.Session:
    """Session shared by the authenticator and the fetcher.

    Only idempotent methods are retried; the token POST is sent exactly once.
    The final response of an exhausted retry is returned rather than raised so
    callers see the real status code.
    """
    s = requests.Session()
    s.headers.update(REQUEST_HEADERS)
    retries = Retry(
        total=RETRY_ATTEMPTS,
        backoff_factor=RETRY_BACKOFF,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset({"GET", "HEAD"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s
